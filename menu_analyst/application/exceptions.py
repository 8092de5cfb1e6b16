class AnalysisServiceError(RuntimeError):
    """Base class for every failure reported by an analysis service binding."""
    pass


class AnalysisUpstreamError(AnalysisServiceError):
    """Raised when the model provider fails (network errors, service unavailable)."""
    pass


class AnalysisContractError(AnalysisServiceError):
    """Raised when the provider answer violates the contract (bad JSON, wrong shape, empty text)."""
    pass


class AnalysisTimeoutError(AnalysisServiceError):
    """Raised when a call does not complete within the configured timeout."""
    pass
