"""FastAPI integration exposing installer operations over HTTP."""

from typing import Optional

from fastapi import APIRouter, FastAPI, HTTPException

from ..core.models import OperationResult
from ..installer import CertificateInstaller

ERROR_STATUS_CODES = {
    "ConfigMissing": 409,
    "FetchError": 502,
    "ParseError": 422,
    "InstallRejected": 409,
    "RemovalRejected": 409,
    "PermissionDenied": 403,
    "InvalidAlias": 400,
    "RecordNotFound": 404,
    "StorageError": 500,
}


def _unwrap(result: OperationResult):
    """Return the result value or raise the matching HTTPException."""
    if result.success:
        return result.value
    status_code = ERROR_STATUS_CODES.get(result.error_kind or "", 500)
    raise HTTPException(
        status_code=status_code,
        detail={"error": result.error, "kind": result.error_kind},
    )


def create_router(installer: CertificateInstaller) -> APIRouter:
    """Build routes bound to ``installer``.

    Handlers are plain ``def`` so FastAPI runs the blocking operations in its
    threadpool.
    """
    router = APIRouter()

    @router.get("/status")
    def status() -> dict:
        delegation = installer.delegation_status()
        configuration = installer.configuration_status()
        key_pairs, trust_anchors = installer.certificate_counts()
        return {
            "has_delegation": delegation.has_delegation,
            "has_configuration": delegation.has_configuration,
            "can_install": delegation.can_install,
            "can_remove": delegation.can_remove,
            "configuration": configuration.value.model_dump() if configuration else None,
            "configuration_error": configuration.error,
            "key_pairs": key_pairs,
            "trust_anchors": trust_anchors,
        }

    @router.post("/key-pairs", status_code=201)
    def install_key_pair() -> dict:
        alias = _unwrap(installer.install())
        return {"alias": alias}

    @router.get("/key-pairs")
    def list_key_pairs() -> dict:
        result = installer.list_key_pairs()
        records = _unwrap(result)
        return {
            "key_pairs": [r.model_dump(mode="json") for r in records],
            "warnings": result.warnings,
        }

    @router.get("/key-pairs/{alias}")
    def get_key_pair(alias: str) -> dict:
        return _unwrap(installer.get_key_pair(alias)).model_dump(mode="json")

    @router.delete("/key-pairs/{alias}")
    def remove_key_pair(alias: str) -> dict:
        return {"message": _unwrap(installer.remove_key_pair(alias))}

    @router.post("/trust-anchors", status_code=201)
    def install_trust_anchor() -> dict:
        return {"common_name": _unwrap(installer.install_ca_cert())}

    @router.get("/trust-anchors")
    def list_trust_anchors() -> dict:
        anchors = _unwrap(installer.list_trust_anchors())
        return {"trust_anchors": [a.model_dump(mode="json") for a in anchors]}

    return router


def create_app(installer: CertificateInstaller, prefix: Optional[str] = None) -> FastAPI:
    """FastAPI application serving the installer routes."""
    app = FastAPI(title="cert-installer")
    app.include_router(create_router(installer), prefix=prefix or "")
    return app
