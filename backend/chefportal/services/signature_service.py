"""
Heuristic check that an uploaded PDF carries a signature.

This is not cryptographic verification; it looks for the traces signing
tools usually leave (form fields, /Sig objects, vendor keywords).
"""
import io
import logging
from dataclasses import dataclass, field

from pypdf import PdfReader
from pypdf.errors import PdfReadError

logger = logging.getLogger(__name__)

SIGNATURE_KEYWORDS = [
    "signature", "signed", "digital signature", "electronically signed",
    "e-signature", "esignature", "/sig", "/signature", "docusign",
    "adobe sign", "hellosign", "pandadoc", "signatory", "autograph",
    "/type /sig", "/subfilter", "/byterange",
]

VALID_CONFIDENCE = 0.4


class SignatureValidationError(ValueError):
    pass


@dataclass
class SignatureCheck:
    has_signature: bool
    confidence: float
    has_drawn_signature: bool = False
    has_text_signature: bool = False
    has_form_fields: bool = False
    keywords: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.confidence > VALID_CONFIDENCE and (
            self.has_text_signature or self.has_form_fields or self.has_drawn_signature
        )


def validate_pdf_signature(content: bytes) -> SignatureCheck:
    try:
        reader = PdfReader(io.BytesIO(content))
        fields = reader.get_fields() or {}
        _ = len(reader.pages)
    except (PdfReadError, ValueError, KeyError) as exc:
        logger.warning("Could not parse PDF for signature check: %s", exc)
        raise SignatureValidationError("Failed to validate PDF signature") from exc

    raw = content.decode("latin-1").lower()
    keywords = sorted({kw for kw in SIGNATURE_KEYWORDS if kw in raw})

    has_form_fields = len(fields) > 0
    has_text_signature = bool(keywords)
    has_drawn_signature = "/type /sig" in raw or "/subfilter" in raw

    confidence = 0.0
    if has_form_fields:
        confidence += 0.3
    if has_text_signature:
        confidence += 0.4
    if has_drawn_signature:
        confidence += 0.5
    if keywords:
        confidence += 0.2
    if len(keywords) > 2:
        confidence += 0.1
    if len(content) / 1024 > 500:
        confidence += 0.1
    confidence = min(confidence, 1.0)

    return SignatureCheck(
        has_signature=confidence > VALID_CONFIDENCE,
        confidence=round(confidence, 2),
        has_drawn_signature=has_drawn_signature,
        has_text_signature=has_text_signature,
        has_form_fields=has_form_fields,
        keywords=keywords,
    )
