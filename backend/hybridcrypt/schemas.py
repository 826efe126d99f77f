from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Union


class WireModel(BaseModel):
    # camelCase on the wire, snake_case in Python
    model_config = ConfigDict(populate_by_name=True)


class EncryptRequest(WireModel):
    message: str
    key_matrix: str = Field(alias="keyMatrix")
    public_key: Optional[str] = Field(None, alias="publicKey")


class EncryptResponse(WireModel):
    encrypted_message: str = Field(alias="encryptedMessage")
    encrypted_key: Optional[str] = Field(None, alias="encryptedKey")
    timestamp: str
    message_length: int = Field(alias="messageLength")


class DecryptRequest(WireModel):
    encrypted_message: str = Field(alias="encryptedMessage")
    key_matrix: Optional[str] = Field(None, alias="keyMatrix")
    encrypted_key: Optional[Union[str, List[int]]] = Field(None, alias="encryptedKey")
    private_key: Optional[str] = Field(None, alias="privateKey")
    message_length: Optional[int] = Field(None, alias="messageLength")


class DecryptResponse(WireModel):
    decrypted_message: str = Field(alias="decryptedMessage")


class ErrorDetail(BaseModel):
    kind: str
    message: str


class KeyPairRequest(BaseModel):
    p: int
    q: int
    e: int


class KeyPairResponse(WireModel):
    public_key: str = Field(alias="publicKey")
    private_key: str = Field(alias="privateKey")


class RandomKeyResponse(WireModel):
    key_matrix: str = Field(alias="keyMatrix")
    size: int
