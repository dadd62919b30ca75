class RepoShowError(Exception):
    """
    Base class for every failure the API reports back to the caller.
    `status_code` is the HTTP status the orchestrator responds with.
    """
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# --- Caller-correctable (400) ---

class ValidationError(RepoShowError):
    status_code = 400


class InvalidUrlError(ValidationError):
    pass


class FetchError(RepoShowError):
    status_code = 400


class RepositoryNotFoundError(FetchError):
    pass


class AccessForbiddenError(FetchError):
    pass


# --- Server side (500) ---

class ConfigurationError(RepoShowError):
    status_code = 500


class GenerationError(RepoShowError):
    status_code = 500


class UnexpectedResponseTypeError(GenerationError):
    pass


class MalformedGenerationError(GenerationError):
    pass
