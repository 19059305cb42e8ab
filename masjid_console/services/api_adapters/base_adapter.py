# This module defines the base interface for display backend adapters.
from abc import ABC, abstractmethod


class BackendError(Exception):
    """A failed backend call, carrying the best message that could be extracted."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class BaseDisplayBackendAdapter(ABC):
    """
    Abstract base class for display backend adapters. The backend is the store of
    record for iqamaah ranges and the masjid configuration shown on the displays.
    """

    @abstractmethod
    def fetch_month(self, year, month):
        """Returns the raw month payload, or None when the backend has no data for it."""
        pass

    @abstractmethod
    def create_range(self, request_data):
        pass

    @abstractmethod
    def update_range(self, request_data):
        pass

    @abstractmethod
    def delete_range(self, request_data):
        pass

    @abstractmethod
    def fetch_masjid_config(self):
        """Returns the masjid configuration, or None when none has been saved yet."""
        pass

    @abstractmethod
    def save_masjid_config(self, config_data):
        pass
