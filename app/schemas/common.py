"""
Common Pydantic schemas
"""

from pydantic import BaseModel

class ErrorResponse(BaseModel):
    """Error response schema"""
    message: str

class MessageResponse(BaseModel):
    """Plain confirmation message"""
    message: str
