from pydantic import BaseModel, Field
from typing import List, Optional, Union


class SignatureModel(BaseModel):
    algorithm: str = "Ed25519"
    public_key: str
    sig: str


class MintAuthorizationModel(BaseModel):
    recipient: str
    uri: str
    traits: List[str] = Field(default_factory=list)
    subject_type: Union[int, str]
    citizenship: int
    not_after: int
    signature: SignatureModel


class SelfMintRequest(BaseModel):
    caller: str
    authorization: MintAuthorizationModel
    value: int = 0


class SelfMintResponse(BaseModel):
    token_id: int
    owner: str


class SelfMintTerms(BaseModel):
    authority: str
    registry_address: str
    chain_id: int
    next_sequence: int
    mint_cost: int


class CredentialView(BaseModel):
    token_id: int
    owner: str
    uri: str
    minted_at: int
    last_issued_at: int
    subject_type: str
    citizenship: int
    traits: List[str]
    sanctions_match: Optional[int] = None
    sanctions_monitored: bool
    sanctions_safe: bool
    monitored_until: int


class TraitView(BaseModel):
    token_id: int
    trait: str
    present: bool


class SanctionsView(BaseModel):
    token_id: int
    monitored: bool
    safe: bool
    jurisdiction: Optional[int] = None
    safe_in: Optional[bool] = None


class OwnerCredentials(BaseModel):
    owner: str
    balance: int
    token_ids: List[int]
