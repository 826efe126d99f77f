from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
import logging

from .config import get_settings
from .errors import HybridCipherError, NotInvertibleError
from .hybrid import CipherFailure, handle_decrypt, handle_encrypt
from .key_validator import random_key
from .parsing import format_key_matrix, format_rsa_key
from .rsa_wrap import generate_keypair
from .schemas import (
    DecryptRequest,
    DecryptResponse,
    EncryptRequest,
    EncryptResponse,
    KeyPairRequest,
    KeyPairResponse,
    RandomKeyResponse,
)

# Configure logging
logger = logging.getLogger("uvicorn")

settings = get_settings()

app = FastAPI(title="Hybrid Hill/RSA cipher")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Demo material for the textbook Hill/RSA exercise: key [[2,3],[1,4]], p=3, q=11, e=3
DEMO_KEY = [[2, 3], [1, 4]]
DEMO_RSA = (3, 11, 3)


def _raise_failure(failure: CipherFailure):
    status = 500 if failure.kind == NotInvertibleError.kind else 400
    raise HTTPException(status_code=status, detail=failure.model_dump())


@app.post("/encrypt", response_model=EncryptResponse, response_model_exclude_none=True)
def encrypt_message(req: EncryptRequest):
    logger.info(f"🔐 Encrypt request (wrap key: {bool(req.public_key)})")
    result = handle_encrypt(req, settings)
    if isinstance(result, CipherFailure):
        _raise_failure(result)
    return result


@app.post("/decrypt", response_model=DecryptResponse)
def decrypt_message(req: DecryptRequest):
    logger.info(f"🔓 Decrypt request (wrapped key: {bool(req.encrypted_key)})")
    result = handle_decrypt(req, settings)
    if isinstance(result, CipherFailure):
        _raise_failure(result)
    return result


@app.get("/random-key", response_model=RandomKeyResponse)
def get_random_key(size: int = Query(2, ge=2)):
    if size > settings.max_key_size:
        raise HTTPException(
            status_code=400,
            detail={"kind": "MalformedInput", "message": f"Key size must be at most {settings.max_key_size}"},
        )
    try:
        key = random_key(size, settings.keygen_max_attempts)
    except HybridCipherError as e:
        logger.error(f"❌ Random key generation failed: {e}")
        raise HTTPException(status_code=400, detail={"kind": e.kind, "message": str(e)})
    return RandomKeyResponse(key_matrix=format_key_matrix(key), size=size)


@app.post("/rsa-keypair", response_model=KeyPairResponse)
def create_rsa_keypair(req: KeyPairRequest):
    try:
        public_key, private_key = generate_keypair(req.p, req.q, req.e)
    except HybridCipherError as e:
        raise HTTPException(status_code=400, detail={"kind": e.kind, "message": str(e)})
    return KeyPairResponse(
        public_key=format_rsa_key(public_key),
        private_key=format_rsa_key(private_key),
    )


@app.get("/presets")
def get_presets():
    public_key, private_key = generate_keypair(*DEMO_RSA)
    return {
        "keyMatrix": format_key_matrix(DEMO_KEY),
        "publicKey": format_rsa_key(public_key),
        "privateKey": format_rsa_key(private_key),
        "fillSymbol": settings.fill_symbol,
        "textPolicy": settings.text_policy,
    }
