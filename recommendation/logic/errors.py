class InvalidInput(ValueError):
    """A profile or university record the matching engine cannot use."""


class UniversityNotFound(LookupError):
    def __init__(self, university_id):
        super().__init__(f"University {university_id!r} not found")
        self.university_id = university_id
