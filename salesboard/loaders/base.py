# salesboard/loaders/base.py
from abc import ABC, abstractmethod


class BaseLoader(ABC):
    @abstractmethod
    def load(self, source: str):
        """
        Return the list of Transaction instances found at source.
        Raise a DatasetError before returning anything if source cannot be
        fetched or does not hold a list of transaction records.
        """
        pass
