from abc import ABC, abstractmethod


class TokenSourcePort(ABC):
    @abstractmethod
    def get_token(self) -> str | None:
        """Return the booking access token, or None if the launch carried none."""
        raise NotImplementedError

    @abstractmethod
    def get_user_id(self) -> str | None:
        """Return the host user id, if the host exposes one."""
        raise NotImplementedError
