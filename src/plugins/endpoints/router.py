"""Endpoint routes — list, inspect and partially update managed endpoints.

Endpoints:
    GET /endpoints                — every endpoint, TLS material included
    GET /endpoints/{endpoint_id}  — one endpoint (404 when unknown)
    PUT /endpoints/{endpoint_id}  — partial update; keys left out of the body are untouched
"""

from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from core import storage
from core.update import EndpointUpdateRequest

router = APIRouter()


class EndpointUpdateBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    url: str | None = Field(None, alias="URL")
    public_url: str | None = Field(None, alias="PublicURL")
    group_id: int | None = Field(None, alias="GroupId")
    tls: bool | None = Field(None, alias="TLS")
    tls_skip_verify: bool | None = Field(None, alias="TLSSkipVerify")
    tls_skip_client_verify: bool | None = Field(None, alias="TLSSkipClientVerify")
    tls_ca_cert: str | None = Field(None, alias="TLSCACert")
    tls_cert: str | None = Field(None, alias="TLSCert")
    tls_key: str | None = Field(None, alias="TLSKey")
    type: Literal["local", "remote"] | None = None


@router.get("/endpoints")
def list_endpoints():
    return [ep.to_api() for ep in storage.list_endpoints()]


@router.get("/endpoints/{endpoint_id}")
def get_endpoint(endpoint_id: int):
    return storage.get_endpoint(endpoint_id).to_api()


@router.put("/endpoints/{endpoint_id}")
def update_endpoint(endpoint_id: int, body: EndpointUpdateBody):
    # exclude_unset keeps "absent" and "null" apart
    request = EndpointUpdateRequest.from_payload(body.model_dump(by_alias=True, exclude_unset=True))
    return storage.update_endpoint(endpoint_id, request).to_api()
