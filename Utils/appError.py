class AppError(Exception):
    def __init__(self, message: str, status_code: int):
        """
        Operational error raised by controllers and the ledger.

        Args:
            message (str): Message shown to the client.
            status_code (int): HTTP status code for the response.
        """
        super().__init__(message)

        self.status_code = status_code
        self.status = "fail" if str(status_code).startswith("4") else "error"
        self.is_operational = True

    def to_dict(self) -> dict:
        return {"status": self.status, "message": str(self)}
