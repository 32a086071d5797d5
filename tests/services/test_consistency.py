"""Tests for cosine similarity and the consistency validator."""
import pytest

from conftest import VIDEO_URI
from likeness.domain.value_objects.generation import Completion
from likeness.services.consistency import ConsistencyValidator
from likeness.services.similarity import cosine_similarity


class TestCosineSimilarity:

    def test_identical_vectors(self):
        assert cosine_similarity([0.3, 0.4, 0.5], [0.3, 0.4, 0.5]) == pytest.approx(1.0)

    def test_orthogonal_vectors(self):
        assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)

    def test_opposite_vectors(self):
        assert cosine_similarity([1.0, 2.0], [-1.0, -2.0]) == pytest.approx(-1.0)

    def test_symmetric(self):
        a, b = [0.1, 0.9, 0.3], [0.7, 0.2, 0.4]
        assert cosine_similarity(a, b) == pytest.approx(cosine_similarity(b, a))

    def test_length_mismatch_is_zero(self):
        assert cosine_similarity([1.0, 0.0], [1.0, 0.0, 0.0]) == 0.0

    def test_zero_vector_is_zero(self):
        assert cosine_similarity([0.0, 0.0], [1.0, 1.0]) == 0.0

    def test_empty_vectors_are_zero(self):
        assert cosine_similarity([], []) == 0.0


class TestConsistencyValidator:

    @pytest.fixture
    def validator(self, gateway):
        return ConsistencyValidator(gateway)

    async def test_matching_content_passes(self, validator, gateway):
        gateway.embed_handler = lambda text: [0.6, 0.8]

        result = await validator.validate(VIDEO_URI, [0.6, 0.8], threshold=0.85)

        assert result.passed
        assert not result.errored
        assert result.score == pytest.approx(1.0)
        assert result.details == "Content matches identity with 100.0% similarity"

    async def test_dissimilar_content_fails(self, validator, gateway):
        gateway.embed_handler = lambda text: [0.0, 1.0]

        result = await validator.validate(VIDEO_URI, [1.0, 0.0], threshold=0.85)

        assert not result.passed
        assert not result.errored
        assert result.details == "Content similarity 0.0% is below threshold 85.0%"

    async def test_score_equal_to_threshold_passes(self, validator, gateway):
        gateway.embed_handler = lambda text: [1.0, 0.0]

        result = await validator.validate(VIDEO_URI, [1.0, 0.0], threshold=1.0)

        assert result.passed

    async def test_reference_description_is_included_in_prompt(self, validator, gateway):
        await validator.validate(VIDEO_URI, [1.0, 0.0, 0.0], identity_description="Oval face, green eyes")

        prompt = gateway.complete_calls[0]
        assert "Oval face, green eyes" in prompt[0].text
        assert prompt[1].media_uri == VIDEO_URI

    async def test_errors_become_failing_result(self, validator, gateway):
        def complete(prompt, output_schema, response_modalities):
            raise RuntimeError("provider unavailable")

        gateway.complete_handler = complete

        result = await validator.validate(VIDEO_URI, [1.0, 0.0], threshold=0.5)

        assert result.errored
        assert not result.passed
        assert result.score == 0.0
        assert result.details == "Validation error: provider unavailable"

    @pytest.mark.parametrize("threshold", [1.5, -0.1])
    async def test_out_of_range_threshold_becomes_failing_result(self, validator, gateway, threshold):
        gateway.embed_handler = lambda text: [1.0, 0.0]

        result = await validator.validate(VIDEO_URI, [1.0, 0.0], threshold=threshold)

        assert result.errored
        assert not result.passed
        assert 0.0 <= result.threshold <= 1.0
        assert gateway.complete_calls == []

    async def test_default_threshold_from_settings(self, validator, gateway):
        gateway.complete_handler = lambda prompt, output_schema, response_modalities: Completion(
            output=output_schema(description="a face")
        )

        result = await validator.validate(VIDEO_URI, [1.0, 0.0, 0.0])

        assert result.threshold == 0.85
