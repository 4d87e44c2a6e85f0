class ServiceError(Exception):
    """Base class for the errors raised when editing a service document."""


class InvalidDate(ServiceError):
    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid service date {value!r}, expected M/D/YY")


class ServiceNotFound(ServiceError):
    def __init__(self, date):
        self.date = date
        super().__init__(f"No service details for {date}")


class ElementNotFound(ServiceError):
    def __init__(self, date, element_id):
        self.date = date
        self.element_id = element_id
        super().__init__(f"No element {element_id!r} in the service of {date}")


class InvalidElement(ServiceError):
    """The element exists but cannot receive the requested change."""
