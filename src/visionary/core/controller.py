"""
Studio controller: owns a StudioState and runs generations against it.

The controller is the only place that holds state between calls; all updates
go through the reducers in visionary.core.state. It enforces the single
in-flight request through the state's request slot.
"""

from collections.abc import Callable
from typing import Any

from visionary.core import state as st
from visionary.core.composer import ComposedRequest, compose_request
from visionary.core.config import Config
from visionary.core.image_gen import GeminiImageClient, GenerationOutcome
from visionary.logging_config import get_logger

logger = get_logger(__name__)


def execute_request(client: GeminiImageClient, request: ComposedRequest) -> GenerationOutcome:
    """Send a composed request through the client."""
    return client.generate(
        request.prompt,
        reference_images=request.reference_images,
        aspect_ratio=request.aspect_ratio,
        model=request.model,
        seed=request.seed,
    )


class StudioController:
    """Holds the current StudioState and applies reducers to it."""

    def __init__(
        self,
        state: st.StudioState | None = None,
        client: GeminiImageClient | None = None,
        config: Config | None = None,
    ) -> None:
        self.state = state if state is not None else st.initial_state()
        self.client = client or GeminiImageClient(config)

    def dispatch(
        self, reducer: Callable[..., st.StudioState], *args: Any, **kwargs: Any
    ) -> st.StudioState:
        """Apply reducer(state, *args, **kwargs) and keep the result."""
        self.state = reducer(self.state, *args, **kwargs)
        return self.state

    @property
    def is_generating(self) -> bool:
        return self.state.request_state is st.RequestState.REQUESTING

    def generate(self) -> GenerationOutcome:
        """
        Compose a request from the current state and run it.

        Raises:
            ValidationError: If there is no prompt text and no selection
            GenerationInProgressError: If a generation is already outstanding
        """
        request = compose_request(self.state)
        self.state = st.begin_generation(self.state)
        try:
            outcome = execute_request(self.client, request)
        except Exception:
            self.state = st.abort_generation(self.state)
            raise
        self.state = st.complete_generation(
            self.state, outcome, assets_used=request.asset_ids, seed=request.seed
        )
        logger.debug(
            "Generation finished status=%s history=%d",
            outcome.status.value,
            len(self.state.history),
        )
        return outcome
