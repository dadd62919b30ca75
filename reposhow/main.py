import argparse
import json
import sys
from rich.console import Console
from rich.panel import Panel
from rich.markdown import Markdown
from pydantic import ValidationError as PydanticValidationError

from reposhow.config import configure_logging, load_settings
from reposhow.errors import RepoShowError
from reposhow.models.presentation import Audience, PresentationConfig, RunOfShow, TimeConstraint
from reposhow.refinery.engine import GenerationClient
from reposhow.service import RunOfShowService

console = Console()


def render_run_of_show(outline: dict, metadata: dict):
    """
    Prints the outline as one panel per section.
    """
    try:
        show = RunOfShow.model_validate(outline)
    except PydanticValidationError:
        console.print("[yellow]Outline does not match the expected shape; showing raw JSON.[/yellow]")
        console.print_json(json.dumps(outline))
        return

    console.print(Panel(
        f"[bold green]{show.title or 'Untitled'}[/bold green]\n[italic]{show.overview}[/italic]",
        title=f"{metadata['repoName']} · {metadata['language']} · ★ {metadata['stars']}",
    ))

    for index, section in enumerate(show.sections, start=1):
        body = [section.content, ""]
        if section.key_points:
            body.append("**Key points**")
            body.extend(f"- {point}" for point in section.key_points)
            body.append("")
        if section.presenter_notes:
            body.append("**Presenter notes**")
            body.extend(f"- {note}" for note in section.presenter_notes)
        console.print(Panel(
            Markdown("\n".join(body)),
            title=f"{index}. {section.title}",
            subtitle=section.duration or None,
        ))

    if show.qa_predictions:
        console.print(Panel("\n".join(f"• {q}" for q in show.qa_predictions), title="Likely Questions"))
    if show.tech_questions:
        console.print(Panel("\n".join(f"• {q}" for q in show.tech_questions), title="Technical Questions"))
    if show.closing_notes:
        console.print(Panel(show.closing_notes, title="Closing"))


def main():
    parser = argparse.ArgumentParser(description="RepoShow: turn a GitHub repository into a presentation run of show")
    parser.add_argument("repo_url", help="GitHub repository URL, e.g. https://github.com/owner/repo")
    parser.add_argument("--audience", choices=[a.value for a in Audience], default=Audience.CONFERENCE.value,
                        help="Who the talk is for (default: conference)")
    parser.add_argument("--time", dest="time_constraint", choices=[t.value for t in TimeConstraint],
                        default=TimeConstraint.FIFTEEN_MIN.value, help="Time slot (default: 15min)")
    parser.add_argument("--no-qa", action="store_true", help="Skip Q&A preparation")
    parser.add_argument("--no-demo", action="store_true", help="Skip live demo suggestions")
    parser.add_argument("--model", help="Generation model id (overrides REPOSHOW_MODEL)", default=None)
    parser.add_argument("--token", help="GitHub Personal Access Token (optional, overrides env)", default=None)
    parser.add_argument("--json", action="store_true", help="Print the raw JSON response instead of panels")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args()
    configure_logging(args.verbose)
    settings = load_settings()

    config = PresentationConfig(
        audience=args.audience,
        time_constraint=args.time_constraint,
        include_qa=not args.no_qa,
        include_live_demo=not args.no_demo,
    )
    body = {"repoUrl": args.repo_url, "config": config.to_wire()}

    generator = GenerationClient(
        api_key=settings.anthropic_api_key,
        model_name=args.model or settings.model_name,
    )
    service = RunOfShowService(generator, github_token=args.token or settings.github_token)

    console.print(f"[bold blue]RepoShow[/bold blue] - Targeting: [cyan]{args.repo_url}[/cyan] | Audience: [magenta]{args.audience}[/magenta] | Slot: {args.time_constraint}")

    try:
        with console.status("Analyzing repository and drafting the run of show..."):
            repo_url, config = service.validate_request(body)
            result = service.generate(repo_url, config)
    except RepoShowError as e:
        console.print(f"[red]Failed: {e.message}[/red]")
        sys.exit(1)
    except Exception as e:
        console.print(f"[red]Failed: {e}[/red]")
        sys.exit(1)

    if args.json:
        console.print_json(json.dumps(result))
    else:
        render_run_of_show(result["runOfShow"], result["metadata"])


if __name__ == "__main__":
    main()
