"""
Client base class shared by every category wrapper.

A client is a thin call-through holding the resolved spec and the parsed
feature map. It never mutates the spec; features live on the client
instance only.
"""

from typing import Any, Generic, TypeVar

from model_catalog.registry.models import FeatureOptions, ModelSpec

SpecT = TypeVar("SpecT", bound=ModelSpec)


class ModelClient(Generic[SpecT]):
    """
    Base client parameterized by a resolved spec and its features.

    Attributes:
        model_spec: The registered spec this client dispatches to
    """

    def __init__(self, model_spec: SpecT, features: FeatureOptions | None = None) -> None:
        self.model_spec = model_spec
        self._features: FeatureOptions = dict(features or {})

    def set_features(self, features: FeatureOptions | None) -> None:
        """Replace the enabled features on this client instance."""
        self._features = dict(features or {})

    def get_features(self) -> FeatureOptions:
        """Return a copy of the enabled features."""
        return dict(self._features)

    def get_model_id(self) -> str:
        """Model name sent to the vendor API."""
        return self.model_spec.vendor_model_name

    def get_model_spec(self) -> SpecT:
        return self.model_spec

    def _prepare_request(self, request: dict[str, Any]) -> dict[str, Any]:
        """
        Run the spec's request hook once, immediately before dispatch.

        The hook may mutate the request in place.
        """
        hook = self.model_spec.mangle_request
        if hook is not None:
            hook(request, self.get_features())
        return request

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.model_spec.key!r}, features={self._features!r})"
