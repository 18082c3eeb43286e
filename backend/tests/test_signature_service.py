import pytest

from chefportal.services.signature_service import SignatureValidationError, validate_pdf_signature


class TestSignatureHeuristic:
    def test_signed_pdf_is_valid(self, make_pdf):
        check = validate_pdf_signature(make_pdf(signed=True))
        assert check.is_valid
        assert check.has_text_signature
        assert "docusign" in check.keywords
        assert check.confidence > 0.4

    def test_blank_pdf_is_not_valid(self, make_pdf):
        check = validate_pdf_signature(make_pdf(signed=False))
        assert not check.is_valid
        assert check.confidence == 0.0
        assert check.keywords == []

    def test_confidence_is_capped(self, make_pdf):
        content = make_pdf(signed=True) + b"\n% /Type /Sig /SubFilter /ByteRange signature signatory\n"
        check = validate_pdf_signature(content)
        assert check.confidence <= 1.0
        assert check.has_drawn_signature

    def test_garbage_raises(self):
        with pytest.raises(SignatureValidationError):
            validate_pdf_signature(b"%PDF-1.4 this is not really a pdf")
