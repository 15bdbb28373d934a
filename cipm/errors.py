"""Error types raised by the data-access layer and services."""


class FirebaseServiceError(Exception):
    """A Firestore / Firebase call failed.

    Carries the vendor error code, the DAO operation that failed and the
    collection it touched so handlers can log and report it uniformly.
    """

    status_code = 500

    def __init__(self, message, code='unknown', operation=None, collection=None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.operation = operation
        self.collection = collection

    def to_dict(self):
        return {
            'error': self.message,
            'code': self.code,
            'operation': self.operation,
            'collection': self.collection,
        }


class NotFoundError(FirebaseServiceError):
    status_code = 404

    def __init__(self, collection, doc_id, operation=None):
        super().__init__(
            f'El documento "{doc_id}" no existe en "{collection}".',
            code='not-found',
            operation=operation,
            collection=collection,
        )
        self.doc_id = doc_id


class ValidationError(ValueError):
    """Input rejected by a service before reaching Firestore."""
