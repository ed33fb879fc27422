from fastapi import APIRouter

from routedoc.metadata.annotations import ApiInfo, api_operation

__api__ = ApiInfo(value="oauth", path="/oauth", description="Token exchange")

router = APIRouter(prefix="/oauth")


@router.post("/token")
@api_operation("Issue a token")
def issue_token(grant_type: str) -> dict:
    return {}
