"""Domain errors. Each carries the HTTP status the API answers it with."""


class MotionControlError(Exception):
    """Base class for failures reported to the client as {"error": message}."""
    status_code = 500


class MissingInputError(MotionControlError):
    """A required generate input was absent or empty."""
    status_code = 400


class JobNotFoundError(MotionControlError):
    status_code = 404

    def __init__(self, job_id: str):
        super().__init__("Job not found")
        self.job_id = job_id


class ProviderError(MotionControlError):
    """The inference provider call failed; the message is the provider's own."""
    status_code = 500


class UploadTooLargeError(MotionControlError):
    status_code = 413

    def __init__(self, max_bytes: int):
        super().__init__(f"File too large (max {max_bytes // (1024 * 1024)} MB)")
        self.max_bytes = max_bytes
