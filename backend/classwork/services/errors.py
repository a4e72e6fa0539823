class ClassworkDataError(ValueError):
    """A record read from the store or a snapshot does not have the expected shape"""

    def __init__(self, collection: str, index: int, message: str):
        self.collection = collection
        self.index = index
        super().__init__(f"{collection}[{index}]: {message}")


class ClassworkSourceError(RuntimeError):
    """The configured data source cannot be used"""
