class MaintenixError(Exception):
    """Base exception for caller-facing Maintenix failures."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)


class NotFoundError(MaintenixError):
    """Raised when a machine, record, responsible or photo does not exist."""

    def __init__(self, resource: str, detail: str | None = None):
        self.resource = resource
        super().__init__(detail or f"{resource.capitalize()} not found")


class AlreadyFinishedError(MaintenixError):
    """Raised when a mutation targets a record that is already DONE."""

    def __init__(self, detail: str = "Maintenance record already finished"):
        super().__init__(detail)


class NothingToUpdateError(MaintenixError):
    """Raised when an update carries no field to change."""

    def __init__(self, detail: str = "Nothing to update"):
        super().__init__(detail)


class InvalidAttachmentError(MaintenixError):
    """Raised when an uploaded photo is missing, too large or not an image."""

    pass


class SolutionRequiredError(MaintenixError):
    """Raised when a record is finished without a solution description."""

    def __init__(self, detail: str = "Solution description is required to finish a record"):
        super().__init__(detail)
