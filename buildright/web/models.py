"""Shared Pydantic request models for the BuildRight API.

Field aliases follow the camelCase JSON used by the chat UI. Required
fields are validated by the services so that missing values produce the
same 400 message as other validation failures.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class BuildingCodeCreate(BaseModel):
    """Used by: POST /api/building-codes"""

    model_config = ConfigDict(populate_by_name=True)

    code_name: Optional[str] = Field(default=None, alias="codeName")
    code_abbreviation: Optional[str] = Field(default=None, alias="codeAbbreviation")
    code_type: Optional[str] = Field(default=None, alias="codeType")
    jurisdiction: Optional[str] = None
    description: Optional[str] = None
    official_url: Optional[str] = Field(default=None, alias="officialUrl")
    version: Optional[str] = None
    effective_date: Optional[str] = Field(default=None, alias="effectiveDate")


class ChatTitleUpdate(BaseModel):
    """Used by: PATCH /api/chats/{chat_id}/title"""

    title: Optional[str] = None
