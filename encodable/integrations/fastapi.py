"""FastAPI integration for encodable.

Example:
    ```python
    from fastapi import FastAPI
    from encodable.integrations.fastapi import EncodableResponse

    app = FastAPI()

    @app.get("/users/{user_id}")
    def get_user(user_id: int):
        user = session.get(User, user_id)
        return EncodableResponse(user, options={"include": "permissions"})
    ```
"""

from typing import Any, Mapping

from fastapi.responses import JSONResponse

from encodable.encoder import Encoder, get_encoder
from encodable.planning.options import Options


class EncodableResponse(JSONResponse):
    """JSON response that serializes model instances through an encoder."""

    def __init__(
        self,
        content: Any,
        options: Options | None = None,
        encoder: Encoder | None = None,
        status_code: int = 200,
        headers: Mapping[str, str] | None = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize response.

        Args:
            content: A model instance, a list of model instances, or plain JSON data
            options: Serialization options applied to every model instance
            encoder: Encoder to use. If None, uses the global encoder.
            status_code: HTTP status code
            headers: Extra response headers
        """
        self.encoder = encoder or get_encoder()
        self.options = options
        super().__init__(content, status_code=status_code, headers=headers, **kwargs)

    def render(self, content: Any) -> bytes:
        return super().render(self.encode(content))

    def encode(self, content: Any) -> Any:
        if isinstance(content, (list, tuple)):
            return [self.encode(item) for item in content]
        if self.encoder.adapter.is_model(content) and not isinstance(content, type):
            return self.encoder.serialize(content, self.options)
        return content
