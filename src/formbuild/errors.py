from __future__ import annotations


class FormBuildError(Exception):
    message = "Internal Server Error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        self.message = message or self.message


class FormValidationError(FormBuildError):
    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors) or "Invalid form structure")
        self.errors = errors


class MissingParameterError(FormBuildError):
    message = "Missing mandatory parameter"


class InvalidFormDataError(FormBuildError):
    message = "Invalid form data"


class AccessDeniedError(FormBuildError):
    pass


class MissingClientKeyError(AccessDeniedError):
    message = "x-client-key header is required"


class InvalidClientKeyError(AccessDeniedError):
    message = "key is not found"


class FormNotFoundError(FormBuildError):
    message = "Failed get form because the form not found or no longer exists"


class StorageError(FormBuildError):
    pass


class RenderError(FormBuildError):
    pass
