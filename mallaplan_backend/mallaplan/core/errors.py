class PlanningError(Exception):
    """Base class for failures raised by the planning engine and its collaborators."""


class InvalidTermError(PlanningError):
    def __init__(self, period, year: int, reason: str):
        self.period = getattr(period, "value", period)
        self.year = year
        self.reason = reason
        super().__init__(f"Error in {self.period} {year}: {reason}")


class UnknownCareerError(PlanningError):
    def __init__(self, career_code: str):
        self.career_code = career_code
        super().__init__(f"Curriculum not found for career {career_code}.")
