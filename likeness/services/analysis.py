"""Video analysis service for training data assessment."""
from likeness.core.logging import get_logger
from likeness.domain.interfaces.gateway.model_gateway import ModelGateway
from likeness.domain.value_objects.analysis import DataQualityReport, VideoAnalysisReport
from likeness.domain.value_objects.generation import PromptPart
from likeness.services.prompts import DATA_QUALITY_PROMPT, VIDEO_ANALYSIS_PROMPT

logger = get_logger(__name__)


class VideoAnalysisService:
    """Assess uploaded actor footage before it is used for training."""

    def __init__(self, gateway: ModelGateway) -> None:
        self._gateway = gateway

    async def analyze_video(self, video_uri: str) -> VideoAnalysisReport:
        """Report how suitable a video is for training a likeness model.

        Args:
            video_uri: Video as a data URI

        Returns:
            VideoAnalysisReport with the suitability report text
        """
        completion = await self._gateway.complete(
            [PromptPart.from_text(VIDEO_ANALYSIS_PROMPT), PromptPart.from_media(video_uri)],
            output_schema=VideoAnalysisReport,
        )
        logger.info("Video analyzed", report_length=len(completion.output.suitability_report))
        return completion.output

    async def validate_data_quality(self, video_uri: str) -> DataQualityReport:
        """Score a training video's resolution, lighting, visibility, blur and diversity.

        The overall score is recomputed from the component scores rather than
        taken from the model.

        Args:
            video_uri: Video as a data URI

        Returns:
            DataQualityReport
        """
        completion = await self._gateway.complete(
            [PromptPart.from_text(DATA_QUALITY_PROMPT), PromptPart.from_media(video_uri)],
            output_schema=DataQualityReport,
        )
        report: DataQualityReport = completion.output
        overall = round(report.weighted_score(), 4)
        if abs(overall - report.overall_score) > 0.01:
            logger.debug(
                "Replacing model overall quality score",
                model_score=report.overall_score,
                weighted_score=overall,
            )
        report = report.model_copy(update={"overall_score": overall})
        logger.info("Data quality validated", overall_score=report.overall_score)
        return report
