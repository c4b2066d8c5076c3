#
#
#


class UnboundException(Exception):
    pass


class UnboundClientException(UnboundException):
    pass


class UnboundClientTransportError(UnboundClientException):
    pass


class UnboundClientRejected(UnboundClientException):
    def __init__(self, msg, result=None, validations=None):
        if validations:
            msg = f'{msg} ({validations})'
        super().__init__(msg)
        self.result = result
        self.validations = validations


class UnboundClientUnauthorized(UnboundClientRejected):
    def __init__(self):
        super().__init__('Unauthorized')


class UnboundRecordNotFound(UnboundException):
    pass


class UnboundInvalidRecord(UnboundException):
    pass
