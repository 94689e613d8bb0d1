"""Account errors."""


class AccountError(Exception):
    pass


class AccountAlreadyExistsError(AccountError):
    def __init__(self, username: str) -> None:
        super().__init__(f"username already taken: {username}")
        self.username = username


class AccountNotFoundError(AccountError):
    def __init__(self, account_id: str) -> None:
        super().__init__(f"account not found: {account_id}")
        self.account_id = account_id
