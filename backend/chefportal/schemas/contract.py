from chefportal.schemas.base import CamelModel, StatusResponse


class ContractResponse(CamelModel):
    id: str
    user_id: str
    company_contract_original_url: str | None
    company_contract_signed_url: str | None
    company_contract_status: str
    company_contract_signature_valid: bool | None
    job_offer_original_url: str | None
    job_offer_signed_url: str | None
    job_offer_status: str
    job_offer_signature_valid: bool | None
    notes: str | None
    created_at: str
    last_updated: str


class ContractEnvelope(CamelModel):
    contract: ContractResponse | None
    status: StatusResponse


class ContractUpdate(CamelModel):
    company_contract_status: str | None = None
    job_offer_status: str | None = None
    notes: str | None = None


class SignatureResult(CamelModel):
    document: str
    valid: bool
    confidence: float
    keywords: list[str]


class SignedUploadResponse(ContractEnvelope):
    signatures: list[SignatureResult]


class AdminContractRow(CamelModel):
    user_id: str
    email: str | None
    display_name: str | None
    contract: ContractResponse | None
    status: StatusResponse
