from pydantic import BaseModel, ConfigDict


class KeyboardButton(BaseModel):
    """https://core.telegram.org/bots/api#keyboardbutton"""
    model_config = ConfigDict(frozen = True)

    text: str
    request_contact: bool | None = None
    request_location: bool | None = None

    @classmethod
    def contact_request(cls, text: str) -> "KeyboardButton":
        return cls(text = text, request_contact = True)

    @classmethod
    def location_request(cls, text: str) -> "KeyboardButton":
        return cls(text = text, request_location = True)

    def to_api_dict(self) -> dict:
        return self.model_dump(exclude_none = True)
