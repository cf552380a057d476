"""Tests for the pipeline exception hierarchy."""

import pickle

import pytest

from molsep.core.exceptions import (
    ConfigurationError, GraphFormatError, PipelineError, ResourceError, ValidationError
)


class TestPickling:

    def test_resource_error_keeps_attributes(self):
        error = ResourceError("no memory", resource_type="memory", stage="separation")
        restored = pickle.loads(pickle.dumps(error))
        assert isinstance(restored, ResourceError)
        assert str(restored) == "no memory"
        assert restored.resource_type == "memory"
        assert restored.stage == "separation"

    def test_graph_format_error_keeps_location(self):
        error = GraphFormatError("malformed vertex line", path="in.tsv", line_number=3)
        restored = pickle.loads(pickle.dumps(error))
        assert str(restored) == "in.tsv:3: malformed vertex line"
        assert restored.path == "in.tsv"
        assert restored.line_number == 3

    @pytest.mark.parametrize("error", [
        PipelineError("failed", stage="separation"),
        ValidationError("invalid", errors=["a", "b"]),
        ConfigurationError("bad strategy", config_path="config.yaml"),
    ])
    def test_other_errors_round_trip(self, error):
        restored = pickle.loads(pickle.dumps(error))
        assert type(restored) is type(error)
        assert str(restored) == str(error)
        assert restored.__dict__ == error.__dict__
