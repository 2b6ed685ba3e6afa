from pydantic import BaseModel, EmailStr


class ResendConfirmationRequest(BaseModel):
    email: EmailStr


class ResendConfirmationResponse(BaseModel):
    success: bool
    message: str


class WebhookResponse(BaseModel):
    status: str
