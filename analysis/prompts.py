from enum import Enum
from typing import Optional

from .errors import InvalidTypeError


class AnalysisType(str, Enum):
    JOBS = "jobs"
    CRITIQUE = "critique"
    CONTACTS = "contacts"


# Types that let the model run Google Search during generation
SEARCH_TYPES = {AnalysisType.JOBS.value, AnalysisType.CONTACTS.value}


JOBS_PROMPT = """You are an expert AI job search assistant. Your user has provided their resume.
1.  First, you **MUST** use the Google Search tool to find around 20 relevant, recent job postings based on the user's resume.
2.  You **MUST** format each job as a Markdown link: [Job Title - Company](ORIGINAL_JOB_POSTING_URL), pointing **directly to the original job posting (e.g., Greenhouse, Lever, or the company's career page)**, NOT a link to a Google search.
3.  **DO NOT** return links to job boards or aggregators like LinkedIn, Indeed, ZipRecruiter, or Glassdoor. Only return direct, original application links.
4.  After the jobs, provide a new section titled "## Networking Contacts" and find 3-5 relevant networking contacts (like recruiters, hiring managers, or team leads) at those companies.
5.  Format contacts as Markdown links: [Full Name - Title at Company](LinkedIn_URL or Company_Profile_URL).
6.  If no jobs or contacts are found, state that clearly. Do not invent results.{filters}"""


CRITIQUE_PROMPT = """You are an expert resume reviewer. Your user has provided their resume.
1.  Provide a concise, professional, and constructive critique of the resume.
2.  Structure your critique with a "## Resume Critique" header.
3.  Include sections for "Strengths" and "Areas for Improvement".
4.  Use bullet points for clear, actionable advice, focusing on clarity, impact, and keywords.
5.  Do NOT use the Google Search tool. Base your critique only on the text."""


CONTACTS_PROMPT = """You are an expert AI networking assistant. Your user has provided their resume.
1.  Analyze the resume to understand the user's industry and key roles.
2.  You **MUST** use the Google Search tool to find 5-10 relevant networking contacts (recruiters, hiring managers, team leads, industry leaders) at companies that would likely hire someone with this resume.
3.  Return the list under a "## Networking Contacts" header.
4.  Format each contact as a Markdown link: [Full Name - Title at Company](LinkedIn_URL or Company_Profile_URL).
5.  Do not return links to Google search results. Do not invent contacts.{filters}"""


FILTER_TEMPLATE = "\n\n**CRITICAL: You MUST adhere to these filters: {filters}**"


def build_filter_clause(location: Optional[str] = None, date_posted: Optional[str] = None) -> str:
    """Render the user's search filters; empty when none apply.

    A ``date_posted`` of ``"any"`` means no date filter.
    """
    filters = ""
    if location and location.strip():
        filters += f" (Location: {location.strip()})"
    if date_posted and date_posted.strip() and date_posted.strip().lower() != "any":
        filters += f" (Posted: {date_posted.strip().replace('_', ' ')})"
    if not filters:
        return ""
    return FILTER_TEMPLATE.format(filters=filters)


def get_system_prompt(analysis_type: str, location: Optional[str] = None, date_posted: Optional[str] = None) -> str:
    """Select the system instruction for ``analysis_type``.

    Raises InvalidTypeError for anything other than jobs, critique or contacts.
    """
    if analysis_type == AnalysisType.JOBS.value:
        return JOBS_PROMPT.format(filters=build_filter_clause(location, date_posted))
    if analysis_type == AnalysisType.CRITIQUE.value:
        # critique never searches, so filters are meaningless here
        return CRITIQUE_PROMPT
    if analysis_type == AnalysisType.CONTACTS.value:
        return CONTACTS_PROMPT.format(filters=build_filter_clause(location, date_posted))
    raise InvalidTypeError()


def uses_search(analysis_type: str) -> bool:
    return analysis_type in SEARCH_TYPES
