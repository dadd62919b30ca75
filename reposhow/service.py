import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Tuple
from pydantic import ValidationError as PydanticValidationError

from reposhow.errors import ConfigurationError, RepoShowError, ValidationError
from reposhow.models.presentation import PresentationConfig
from reposhow.probes.github import GithubProbe, INVALID_URL_MESSAGE, is_repo_url, parse_repo_url
from reposhow.refinery.engine import GenerationClient, MISSING_KEY_MESSAGE
from reposhow.refinery.prompts import build_prompt
from reposhow.refinery.validator import parse_run_of_show

logger = logging.getLogger(__name__)

LOG_PREFIX = "[RunOfShow API]"
UNEXPECTED_MESSAGE = "An unexpected error occurred"


class RunOfShowService:
    """
    Runs one request end to end: validate, fetch, prompt, generate, normalize.
    The generation client is shared; a fresh probe is built for every request.
    """

    def __init__(
        self,
        generator: GenerationClient,
        probe_factory: Callable[..., GithubProbe] = GithubProbe,
        github_token: Optional[str] = None,
    ):
        self.generator = generator
        self.probe_factory = probe_factory
        self.github_token = github_token

    def validate_request(self, body: Any) -> Tuple[str, PresentationConfig]:
        if not isinstance(body, dict):
            raise ValidationError("Invalid JSON in request body")

        repo_url = body.get("repoUrl")
        if not repo_url or not isinstance(repo_url, str):
            raise ValidationError("Repository URL is required and must be a string")
        if not is_repo_url(repo_url):
            raise ValidationError(INVALID_URL_MESSAGE)

        raw_config = body.get("config")
        if not raw_config or not isinstance(raw_config, dict):
            raise ValidationError("Presentation configuration is required")
        try:
            config = PresentationConfig.model_validate(raw_config)
        except PydanticValidationError as e:
            fields = ", ".join(str(err["loc"][-1]) for err in e.errors() if err.get("loc"))
            raise ValidationError(f"Invalid presentation configuration: {fields or 'config'}") from e

        if not self.generator.is_configured:
            raise ConfigurationError(MISSING_KEY_MESSAGE)

        return repo_url.strip(), config

    def generate(self, repo_url: str, config: PresentationConfig) -> Dict[str, Any]:
        owner, repo = parse_repo_url(repo_url)

        probe = self.probe_factory(token=self.github_token)
        analysis = probe.analyze_repository(owner, repo)
        logger.info(
            "%s Analyzed %s/%s: %d structure entries, %d key files",
            LOG_PREFIX, owner, repo, len(analysis.file_structure), len(analysis.key_files),
        )

        prompt = build_prompt(analysis, config)
        raw_text = self.generator.generate(prompt)
        run_of_show = parse_run_of_show(raw_text)

        return {
            "runOfShow": run_of_show,
            "metadata": {
                "repoName": analysis.name,
                "language": analysis.language,
                "stars": analysis.stats.stars,
                "generatedAt": datetime.now(timezone.utc).isoformat(),
                "config": config.to_wire(),
            },
        }

    def handle(self, body: Any) -> Tuple[Dict[str, Any], int]:
        """
        Single translation point from exceptions to (payload, HTTP status).
        """
        try:
            repo_url, config = self.validate_request(body)
            return self.generate(repo_url, config), 200
        except ConfigurationError as e:
            logger.error("%s Server misconfiguration: %s", LOG_PREFIX, e.message)
            return {"error": e.message}, e.status_code
        except RepoShowError as e:
            level = logging.WARNING if e.status_code < 500 else logging.ERROR
            logger.log(level, "%s %s: %s", LOG_PREFIX, type(e).__name__, e.message, exc_info=e.status_code >= 500)
            return {"error": e.message}, e.status_code
        except Exception:
            logger.exception("%s Unhandled failure", LOG_PREFIX)
            return {"error": UNEXPECTED_MESSAGE}, 500
