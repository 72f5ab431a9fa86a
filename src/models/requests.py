from typing import Optional
from pydantic import BaseModel, Field


class CommandRequest(BaseModel):
    """
    Body for creating or editing a command.

    Both fields are optional at the schema level so that a missing or empty
    value is reported as a 400 by the endpoint instead of a 422.
    """

    command: Optional[str] = Field(
        None, description="Command text, usually a shell command template"
    )
    description: Optional[str] = Field(None, description="What the command does")


class ExportRequest(BaseModel):
    filename: Optional[str] = Field(None, description="Name of the CSV file to write")
    data: Optional[str] = Field(None, description="CSV content, written verbatim")
