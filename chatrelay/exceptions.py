"""
Exceptions raised while relaying a chat completion
"""


class ChatRelayError(Exception):
    """Base error rendered to the client as {"error": message}"""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class MalformedRequest(ChatRelayError):
    """Request body could not be parsed as a JSON object"""

    status_code = 400


class MissingField(ChatRelayError):
    """`messages` is absent or not a list of messages"""

    status_code = 400


class EmptyPrompt(ChatRelayError):
    """Formatter produced nothing for a non-empty conversation"""

    status_code = 400


class UpstreamRejected(ChatRelayError):
    """Inference capability refused the model or prompt before generating"""

    status_code = 500


class UpstreamFailure(ChatRelayError):
    """Inference capability failed after accepting the request"""

    status_code = 500


class ServerStopping(ChatRelayError):
    """Shutdown has already been requested"""

    status_code = 409


class ConfigurationError(Exception):
    """Invalid startup configuration"""


class InvalidPort(ConfigurationError):
    """Port setting is not a usable TCP port number"""
