"""Tests for the HTTP API using dependency overrides."""
import pytest
from fastapi.testclient import TestClient

from conftest import SOURCE_IMAGE, VIDEO_URI, FakeDownloader, FakeModelGateway, RecordingSleep
from likeness.core.config import FeatureFlags
from likeness.core.exceptions import FatalGatewayError, RateLimitedError
from likeness.domain.value_objects.generation import Completion, Operation, OperationError
from likeness.infrastructure.dependencies import (
    get_analysis_service,
    get_clip_generation_service,
    get_consistency_validator,
    get_feature_flags,
    get_identity_service,
    get_profile_service,
    get_refinement_service,
)
from likeness.infrastructure.storage.memory import InMemoryProfileStore
from likeness.main import app
from likeness.services.analysis import VideoAnalysisService
from likeness.services.clip_generation import ClipGenerationService
from likeness.services.consistency import ConsistencyValidator
from likeness.services.identity import IdentityEmbeddingService
from likeness.services.profiles import ActorProfileService
from likeness.services.refinement import LikenessRefinementService

API = "/api/v1"


class ApiHarness:
    """Fakes wired into the app through dependency overrides."""

    def __init__(self) -> None:
        self.gateway = FakeModelGateway()
        self.sleep = RecordingSleep()
        self.flags = FeatureFlags()
        validator = ConsistencyValidator(self.gateway)
        clip_service = ClipGenerationService(
            gateway=self.gateway,
            downloader=FakeDownloader(),
            validator=validator,
            poll_interval=5.0,
            poll_timeout=60.0,
            sleep=self.sleep,
            clock=self.sleep.clock,
        )
        refinement_service = LikenessRefinementService(self.gateway, max_attempts=5, sleep=self.sleep)
        profile_service = ActorProfileService(InMemoryProfileStore())

        app.dependency_overrides = {
            get_clip_generation_service: lambda: clip_service,
            get_refinement_service: lambda: refinement_service,
            get_consistency_validator: lambda: validator,
            get_analysis_service: lambda: VideoAnalysisService(self.gateway),
            get_identity_service: lambda: IdentityEmbeddingService(self.gateway),
            get_profile_service: lambda: profile_service,
            get_feature_flags: lambda: self.flags,
        }
        self.client = TestClient(app)


@pytest.fixture
def api():
    harness = ApiHarness()
    yield harness
    app.dependency_overrides = {}


def test_health(api):
    response = api.client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


class TestGenerationEndpoints:

    def test_generate_clips(self, api):
        response = api.client.post(f"{API}/generation/clips", json={
            "source_image": SOURCE_IMAGE,
            "target_emotion": "Happy",
            "clip_count": 2,
            "intensity": "moderate",
        })

        assert response.status_code == 200
        clips = response.json()["clips"]
        assert len(clips) == 2
        assert clips[0] == {"media_uri": VIDEO_URI, "consistency_score": None}

    def test_invalid_source_image_is_400(self, api):
        response = api.client.post(f"{API}/generation/clips", json={
            "source_image": "https://example.com/face.png",
            "target_emotion": "Happy",
            "clip_count": 1,
        })

        assert response.status_code == 400
        assert response.json()["detail"] == "Could not determine content type from data URI."

    def test_undecodable_source_image_is_400(self, api):
        response = api.client.post(f"{API}/generation/clips", json={
            "source_image": "data:image/png;base64,@@not-base64@@",
            "target_emotion": "Happy",
            "clip_count": 2,
        })

        assert response.status_code == 400
        assert response.json()["detail"].startswith("Invalid base64 payload in data URI")
        assert api.gateway.submitted == []

    def test_failed_batch_is_502_with_first_error(self, api):
        api.gateway.submit = lambda index, request: Operation(
            id=f"operations/{index}", done=True, error=OperationError(message=f"failure {index}")
        )

        response = api.client.post(f"{API}/generation/clips", json={
            "source_image": SOURCE_IMAGE,
            "target_emotion": "Happy",
            "clip_count": 3,
        })

        assert response.status_code == 502
        assert response.json()["detail"] == "failure 0"

    def test_clip_count_above_limit_is_rejected(self, api):
        response = api.client.post(f"{API}/generation/clips", json={
            "source_image": SOURCE_IMAGE,
            "target_emotion": "Happy",
            "clip_count": 100,
        })

        assert response.status_code == 422

    def test_clips_are_recorded_on_profile(self, api):
        profile = api.client.post(f"{API}/profiles", json={"name": "Jane Doe"}).json()
        api.client.put(f"{API}/profiles/{profile['id']}/identity", json={
            "embedding": [1.0, 0.0, 0.0],
            "reference_frames": [SOURCE_IMAGE],
        })

        response = api.client.post(f"{API}/generation/clips", json={
            "source_image": SOURCE_IMAGE,
            "target_emotion": "Sad",
            "clip_count": 1,
            "validate_consistency": True,
            "profile_id": profile["id"],
        })

        assert response.status_code == 200
        assert response.json()["clips"][0]["consistency_score"] == pytest.approx(1.0)
        assert "Maintain exact facial structure" in api.gateway.submitted[0].target_description

        updated = api.client.get(f"{API}/profiles/{profile['id']}").json()
        assert list(updated["emotion_coverage"]) == ["Sad"]
        assert updated["consistency_score"] == pytest.approx(1.0)

    def test_unknown_profile_is_404(self, api):
        response = api.client.post(f"{API}/generation/clips", json={
            "source_image": SOURCE_IMAGE,
            "target_emotion": "Happy",
            "clip_count": 1,
            "profile_id": "profile_0_missing",
        })

        assert response.status_code == 404

    def test_refinement_exhausted_is_429(self, api):
        def complete(prompt, output_schema, response_modalities):
            raise RateLimitedError("quota")

        api.gateway.complete_handler = complete

        response = api.client.post(f"{API}/generation/refine", json={
            "base_image": SOURCE_IMAGE,
            "instructions": "Sharper jawline",
        })

        assert response.status_code == 429
        assert response.json()["detail"] == "Failed to refine likeness after multiple retries."
        assert len(api.sleep.delays) == 4

    def test_consistency_check(self, api):
        api.gateway.embed_handler = lambda text: [0.0, 1.0]

        response = api.client.post(f"{API}/generation/consistency", json={
            "generated_media_uri": VIDEO_URI,
            "identity_embedding": [1.0, 0.0],
        })

        assert response.status_code == 200
        body = response.json()
        assert body["passed"] is False
        assert body["threshold"] == 0.85
        assert body["details"] == "Content similarity 0.0% is below threshold 85.0%"


class TestAnalysisEndpoints:

    def test_identity_embedding_requires_flag(self, api):
        response = api.client.post(f"{API}/identity/embedding", json={"reference_frames": [SOURCE_IMAGE]})

        assert response.status_code == 403
        assert response.json()["detail"] == "Identity Embedding is disabled"

    def test_identity_embedding_updates_profile(self, api):
        api.flags = FeatureFlags(ENABLE_IDENTITY_EMBEDDING=True)
        profile = api.client.post(f"{API}/profiles", json={"name": "Jane Doe"}).json()

        response = api.client.post(f"{API}/identity/embedding", json={
            "reference_frames": [SOURCE_IMAGE],
            "profile_id": profile["id"],
        })

        assert response.status_code == 200
        assert response.json()["canonical_frame_index"] == 0
        updated = api.client.get(f"{API}/profiles/{profile['id']}").json()
        assert updated["face_embedding"] == [1.0, 0.0, 0.0]
        assert updated["reference_frames"] == [SOURCE_IMAGE]

    def test_video_analysis_gateway_failure_is_502(self, api):
        def complete(prompt, output_schema, response_modalities):
            raise FatalGatewayError("model rejected the request")

        api.gateway.complete_handler = complete

        response = api.client.post(f"{API}/analysis/video", json={"video_uri": VIDEO_URI})

        assert response.status_code == 502

    def test_video_analysis(self, api):
        api.gateway.complete_handler = lambda prompt, output_schema, response_modalities: Completion(
            output=output_schema(suitability_report="Good lighting, few angles.")
        )

        response = api.client.post(f"{API}/analysis/video", json={"video_uri": VIDEO_URI})

        assert response.status_code == 200
        assert response.json() == {"suitability_report": "Good lighting, few angles."}


class TestProfileEndpoints:

    def test_profile_crud(self, api):
        created = api.client.post(f"{API}/profiles", json={"name": "Jane Doe"})
        assert created.status_code == 201
        profile_id = created.json()["id"]

        assert [p["id"] for p in api.client.get(f"{API}/profiles").json()] == [profile_id]

        patched = api.client.patch(f"{API}/profiles/{profile_id}", json={"name": "Jane Roe"})
        assert patched.json()["name"] == "Jane Roe"
        assert patched.json()["id"] == profile_id

        assert api.client.delete(f"{API}/profiles/{profile_id}").status_code == 204
        assert api.client.get(f"{API}/profiles/{profile_id}").status_code == 404
        assert api.client.delete(f"{API}/profiles/{profile_id}").status_code == 404

    def test_emotion_coverage_and_consistency(self, api):
        profile_id = api.client.post(f"{API}/profiles", json={"name": "Jane Doe"}).json()["id"]

        for emotion in ["Happy", "Sad", "Angry", "Surprised", "Fearful", "Disgusted"]:
            api.client.put(f"{API}/profiles/{profile_id}/emotions/{emotion}", json={"quality": 0.7})
        api.client.post(f"{API}/profiles/{profile_id}/consistency", json={"score": 0.9})
        response = api.client.post(f"{API}/profiles/{profile_id}/consistency", json={"score": 0.7})

        body = response.json()
        assert body["emotion_coverage_percent"] == 25.0
        assert body["consistency_score"] == pytest.approx(0.8)

    def test_body_training_video_requires_multimodal(self, api):
        profile_id = api.client.post(f"{API}/profiles", json={"name": "Jane Doe"}).json()["id"]

        facial = api.client.post(f"{API}/profiles/{profile_id}/training-videos", json={"video_uri": VIDEO_URI})
        body = api.client.post(
            f"{API}/profiles/{profile_id}/training-videos",
            json={"category": "body", "video_uri": VIDEO_URI},
        )

        assert facial.status_code == 200
        assert facial.json()["training_videos"]["facial"] == [VIDEO_URI]
        assert body.status_code == 403

    def test_motor_traits_require_full_body(self, api):
        profile_id = api.client.post(f"{API}/profiles", json={"name": "Jane Doe"}).json()["id"]
        traits = {"gait": "long strides", "gestures": ["shrug"], "posture": "upright"}

        assert api.client.put(f"{API}/profiles/{profile_id}/motor-traits", json=traits).status_code == 403

        api.flags = FeatureFlags(ENABLE_FULL_BODY=True)
        response = api.client.put(f"{API}/profiles/{profile_id}/motor-traits", json=traits)
        assert response.status_code == 200
        assert response.json()["motor_traits"]["posture"] == "upright"


class TestFeatureEndpoints:

    def test_features(self, api):
        api.flags = FeatureFlags(ENABLE_ANALYTICS=True)

        features = api.client.get(f"{API}/features").json()

        assert len(features) == 6
        assert {f["name"]: f["enabled"] for f in features}["Analytics"] is True

    def test_emotion_taxonomy_follows_flag(self, api):
        basic = api.client.get(f"{API}/emotions").json()
        api.flags = FeatureFlags(ENABLE_EXPANDED_EMOTIONS=True)
        expanded = api.client.get(f"{API}/emotions").json()

        assert len(basic["emotions"]) == 9
        assert len(expanded["emotions"]) == 24
        assert expanded["intensities"] == ["subtle", "moderate", "intense"]
