"""
Research prompt composition.

Turns a query and its SearchResponse into the instruction block sent to the
model: timestamps, numbered source excerpts, citable image URLs, formatting
guidelines and a sources table the model must reproduce verbatim.
"""

from datetime import UTC, datetime

from ..search.base import SearchResponse, SearchResult
from ..schemas import ChatMessage

ACKNOWLEDGEMENT = "I found some relevant information. Let me analyze it and create a comprehensive report."
DESCRIPTION_LIMIT = 150

FORMATTING_GUIDELINES = """Formatting Guidelines:
1. Structure:
   - Use H1 (#) for main titles
   - Use H2 (##) for major sections
   - Use H3 (###) for subsections
   - Break content into clear, logical sections

2. Text Styling:
   - Use **bold** for emphasis on key points
   - Use *italic* for definitions or subtle emphasis
   - Use `code` for technical terms or data
   - Use > for important quotes or highlights

3. Lists:
   - Use bullet points for related items
   - Use numbered lists for sequential steps
   - Indent sub-points for hierarchy

4. Media Integration:
   - Include up to 3 relevant images using any of these formats:
     1. HTML: <img src="IMAGE_URL" alt="DESCRIPTIVE_TEXT" />
     2. Markdown: ![DESCRIPTIVE_TEXT](IMAGE_URL)
     3. Reference: [Image X]: IMAGE_URL
   - Place images naturally within the content
   - Only use images from the provided URLs above
   - Include descriptive alt text for accessibility

5. Citations:
   - Use inline citations [Source X] for claims
   - Link to sources using [text](URL) format
   - Include a sources table at the end

6. Tables:
   - Use markdown tables for structured data
   - Include headers and align columns
   - Keep tables focused and readable"""


def format_timestamp(moment: datetime) -> str:
    """Long human-readable timestamp, e.g. ``Monday, January 6, 2025 at 3:04:05 PM UTC``."""
    hour = moment.hour % 12 or 12
    return (
        f"{moment:%A}, {moment:%B} {moment.day}, {moment.year} "
        f"at {hour}:{moment:%M:%S} {moment:%p} {moment:%Z}".rstrip()
    )


def build_search_context(results: list[SearchResult]) -> str:
    return "\n\n".join(
        f"[Source {index}]: {result.title}\n{result.content}\nURL: {result.url}\n"
        for index, result in enumerate(results, start=1)
    )


def build_image_list(results: list[SearchResult]) -> str:
    with_images = [r for r in results if r.image is not None and r.image.url]
    return "\n".join(
        f"[Image {index}]: {result.image.url} - From source: {result.title}"  # type: ignore[union-attr]
        for index, result in enumerate(with_images, start=1)
    )


def build_sources_table(results: list[SearchResult]) -> str:
    """Markdown sources table appended to the prompt for the model to copy."""
    rows = []
    for index, result in enumerate(results, start=1):
        if result.snippet:
            description = result.snippet
        else:
            description = result.content[:DESCRIPTION_LIMIT]
            if len(result.content) > DESCRIPTION_LIMIT:
                description += "..."
        rows.append(f"| {index} | [{result.title}]({result.url}) | {description} |")

    return (
        '\n\n<div style="clear: both"></div>\n## Sources\n\n'
        "| Number | Source | Description |\n"
        "|:---------|:---------|:-------------|\n" + "\n".join(rows) + "\n"
    )


def build_research_prompt(query: str, response: SearchResponse, now: datetime | None = None) -> str:
    """
    Compose the research instructions for ``query``.

    Args:
        query: The user's original query
        response: Aggregated search output (results should already carry aligned images)
        now: Timestamp of the search; defaults to the current time

    Returns:
        Prompt text ending with the literal sources table
    """
    now = now or datetime.now().astimezone()
    if now.tzinfo is None:
        now = now.astimezone()
    local_time = format_timestamp(now)
    utc_time = format_timestamp(now.astimezone(UTC))

    direct_answer = f"\nDirect Answer: {response.answer}\n\n" if response.answer else ""

    return f"""Search performed on:
Local Time: {local_time}
UTC: {utc_time}

Here is the research data:{direct_answer}
{build_search_context(response.results)}

Please analyze this information and create a detailed report addressing the original query: "{query}". Include citations to the sources where appropriate.

Available Images from Search Results:
{build_image_list(response.results)}

{FORMATTING_GUIDELINES}

Always end your response with a sources table listing all references used. Format it exactly as shown below:
{build_sources_table(response.results)}"""


def build_messages(query: str, prompt: str) -> list[ChatMessage]:
    """The three-turn conversation sent to the completion route."""
    return [
        ChatMessage(role="user", content=query),
        ChatMessage(role="assistant", content=ACKNOWLEDGEMENT),
        ChatMessage(role="user", content=prompt),
    ]
