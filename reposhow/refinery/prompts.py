import json
from typing import Dict, List
from reposhow.models.analysis import RepositoryAnalysis
from reposhow.models.presentation import Audience, PresentationConfig, TimeConstraint

MAX_MANIFEST_PROMPT_CHARS = 1000

# --- Lookup tables (one entry per enum member) ---

AUDIENCE_CONTEXT: Dict[Audience, str] = {
    Audience.CONFERENCE: "developer conference with technical audience expecting innovative solutions, best practices, and cutting-edge approaches",
    Audience.INTERNAL: "team demonstration focusing on implementation details, architectural decisions, and collaboration benefits",
    Audience.CLIENT: "business stakeholder presentation emphasizing value proposition, practical outcomes, and ROI",
    Audience.INTERVIEW: "technical interview showcasing problem-solving approach, code quality, and engineering thinking",
    Audience.WORKSHOP: "hands-on learning session with interactive components, practical exercises, and audience participation",
}

TIME_GUIDANCE: Dict[TimeConstraint, str] = {
    TimeConstraint.FIVE_MIN: "Lightning talk - hit only the most impressive highlights and key innovations",
    TimeConstraint.FIFTEEN_MIN: "Balanced overview with key technical details and compelling demonstrations",
    TimeConstraint.THIRTY_MIN: "Comprehensive walkthrough with deep dives into interesting technical sections",
    TimeConstraint.ONE_HOUR: "Detailed exploration with multiple examples, architecture deep-dives, hands-on exercises, and extensive Q&A preparation",
}

FOCUS_AREAS: Dict[Audience, str] = {
    Audience.CONFERENCE: "technical innovation, architecture decisions, performance optimizations, unique solutions",
    Audience.INTERNAL: "implementation approach, team collaboration, development workflow, technical debt solutions",
    Audience.CLIENT: "business value, user impact, scalability, reliability, time-to-market benefits",
    Audience.INTERVIEW: "problem-solving process, code quality, testing approach, scalability considerations",
    Audience.WORKSHOP: "practical application, hands-on exercises, interactive demonstrations, learning objectives",
}

# --- Static prompt blocks ---

SYSTEM_PROMPT = "You are an expert presentation coach specializing in technical demos and developer advocacy. Create a compelling, well-structured run-of-show for presenting this GitHub repository to {audience_context}."

STORYTELLING_FRAMEWORK = """STORYTELLING FRAMEWORK:
Create a narrative arc that follows this structure:
1. Hook: What problem does this solve that developers care about?
2. Context: Why is this solution needed/better than alternatives?
3. Journey: Walk through the most impressive technical decisions
4. Impact: What makes this worth paying attention to?
5. Call-to-action: What should the audience do next?"""

SPECIFIC_INSTRUCTIONS = """SPECIFIC INSTRUCTIONS:
- Identify the 2-3 most technically impressive aspects of this codebase
- Create smooth transitions between sections that maintain engagement
- Include specific file/code references where appropriate
- Balance technical depth with accessibility for the target audience
- Suggest timing for dramatic pauses, code reveals, or demo moments
- Anticipate skeptical questions and prepare confident responses"""

WORKSHOP_INSTRUCTION = "- Include hands-on exercises and interactive elements appropriate for the timeframe"

QA_FIELDS = """
  "qaPredictions": [
    "Most likely audience question based on complexity",
    "Common skeptical question about approach",
    "Implementation detail question"
  ],
  "techQuestions": [
    "Deep technical question for advanced audience",
    "Architecture decision rationale question",
    "Scalability/performance question"
  ],"""

OUTPUT_FORMAT = """Return a JSON object with this exact structure (ensure valid JSON syntax):
{{
  "title": "Compelling presentation title that captures the core innovation",
  "overview": "2-3 sentence overview that hooks the audience and sets expectations",
  "sections": [
    {{
      "title": "Section name that clearly indicates what will be covered",
      "duration": "X minutes",
      "content": "Detailed description of what to present in this section, including specific talking points and technical highlights",
      "presenterNotes": [
        "Specific timing notes and pacing guidance",
        "Key emphasis points and moments to pause",
        "Transition cues and setup for next section",
        "Backup explanations for complex concepts"
      ],
      "keyPoints": [
        "Primary takeaway for audience",
        "Technical highlight to emphasize",
        "Business/practical value point"
      ]
    }}
  ],{qa_fields}
  "closingNotes": "Strategic advice for ending strong, including call-to-action and memorable final thought"
}}

CRITICAL: Make this presentation authentic to the actual codebase analyzed, not generic. Reference specific files, architectural decisions, and technical approaches found in the repository. Create a story that makes developers think "I need to check this out" or "I want to try this approach.\""""


def _flag(value: bool) -> str:
    return "true" if value else "false"


def build_system_prompt(config: PresentationConfig) -> str:
    return SYSTEM_PROMPT.format(audience_context=AUDIENCE_CONTEXT[config.audience])


def build_repository_section(analysis: RepositoryAnalysis) -> str:
    lines = ["REPOSITORY ANALYSIS:"]
    lines.append(f"- Name: {analysis.name}")
    lines.append(f"- Description: {analysis.description}")
    lines.append(f"- Primary Language: {analysis.language}")
    lines.append(f"- Topics/Tags: {', '.join(analysis.topics)}")
    lines.append(f"- Repository Stats: {analysis.stats.stars} stars, {analysis.stats.forks} forks")
    lines.append(f"- Size: {analysis.stats.size_kb}KB")
    lines.append("")
    lines.append("README CONTENT:")
    lines.append(analysis.readme)
    lines.append("")
    lines.append("REPOSITORY STRUCTURE:")
    lines.append("\n".join(analysis.file_structure))
    lines.append("")
    lines.append("KEY FILES ANALYZED:")
    lines.append("\n\n".join(f"{f.path} ({f.category}):\n{f.content}" for f in analysis.key_files))

    if analysis.manifest is not None:
        manifest_json = json.dumps(analysis.manifest, indent=2, ensure_ascii=False)
        lines.append("")
        lines.append("CONFIGURATION/DEPENDENCIES:")
        lines.append("```json")
        lines.append(manifest_json[:MAX_MANIFEST_PROMPT_CHARS])
        lines.append("```")

    return "\n".join(lines)


def build_requirements_section(config: PresentationConfig) -> str:
    lines = ["PRESENTATION REQUIREMENTS:"]
    lines.append(f"- Target Duration: {config.time_constraint.value}")
    lines.append(f"- Time Guidance: {TIME_GUIDANCE[config.time_constraint]}")
    lines.append(f"- Focus Areas: {FOCUS_AREAS[config.audience]}")
    lines.append(f"- Include Q&A Preparation: {_flag(config.include_qa)}")
    lines.append(f"- Include Live Demo Suggestions: {_flag(config.include_live_demo)}")
    return "\n".join(lines)


def build_instructions_section(config: PresentationConfig) -> str:
    lines = [SPECIFIC_INSTRUCTIONS]
    if config.audience == Audience.WORKSHOP:
        lines.append(WORKSHOP_INSTRUCTION)
    return "\n".join(lines)


def build_output_format_section(config: PresentationConfig) -> str:
    return OUTPUT_FORMAT.format(qa_fields=QA_FIELDS if config.include_qa else "")


def build_prompt(analysis: RepositoryAnalysis, config: PresentationConfig) -> str:
    """
    Renders the analysis and presentation settings into a single prompt.
    Pure: identical inputs give byte-identical output.
    """
    sections: List[str] = [
        build_system_prompt(config),
        build_repository_section(analysis),
        build_requirements_section(config),
        STORYTELLING_FRAMEWORK,
        build_instructions_section(config),
        build_output_format_section(config),
    ]
    return "\n\n".join(sections)
