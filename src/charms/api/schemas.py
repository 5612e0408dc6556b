from __future__ import annotations

"""Pydantic request schemas for the public API.

These only validate HTTP input shape. The value/transaction wire format is
decoded by charms.data.codec, which raises CodecError on bad payloads.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class CheckRequest(BaseModel):
    app: Dict[str, Any] = Field(..., description="App JSON: {tag, vk_hash, params?}")
    tx: Dict[str, Any] = Field(..., description="Transaction JSON")
    x: Optional[Dict[str, Any]] = Field(default=None, description="Public auxiliary data (Value JSON)")
    w: Optional[Dict[str, Any]] = Field(default=None, description="Private witness data (Value JSON)")


class BuildTokenRequest(BaseModel):
    appTag: str = Field(..., description="Application tag, e.g. token:MYTOKEN")
    vkHash: Optional[str] = Field(default=None, description="Hex vk hash, left-padded to 32 bytes")
    inputAmounts: List[int] = Field(default_factory=list)
    outputAmounts: List[int] = Field(default_factory=list)


class BuildLifecycleRequest(BaseModel):
    appTag: str
    currentState: Optional[int] = Field(default=None, description="Absent for creation")
    nextState: int
    amount: int = Field(..., ge=0, description="Output value in satoshis")
    vkHash: Optional[str] = None


class BuildNftRequest(BaseModel):
    appTag: str
    vkHash: Optional[str] = None
    inputIds: List[str] = Field(default_factory=list, description="Hex NFT ids")
    outputIds: List[str] = Field(default_factory=list, description="Hex NFT ids")


class VerifySpellRequest(BaseModel):
    spell: Dict[str, Any]


class ProofVerifyRequest(BaseModel):
    data: str = Field(..., description="Hex-encoded committed bytes")
    vk: Optional[List[int]] = Field(default=None, description="8 u32 words; defaults to the configured key")
