"""ATS detection from URL patterns."""
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional
from urllib.parse import SplitResult, parse_qs, urlsplit

logger = logging.getLogger(__name__)


class ATSType(Enum):
    """Known ATS systems."""
    WORKDAY = "workday"
    GREENHOUSE = "greenhouse"
    LEVER = "lever"
    BAMBOOHR = "bamboohr"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class DomainPattern:
    """URL signals that identify one vendor."""
    domains: tuple[str, ...]
    patterns: tuple[str, ...] = ()
    paths: tuple[str, ...] = ()
    query_params: tuple[str, ...] = ()


class VendorMatch(NamedTuple):
    vendor: ATSType
    confidence: float


VENDOR_DOMAIN_PATTERNS: dict[ATSType, DomainPattern] = {
    ATSType.WORKDAY: DomainPattern(
        domains=("workday.com", "myworkday.com"),
        patterns=(r"\.myworkday\.com$", r"\w+-\w+\.workday\.com$", r"\w+\.workday\.com$"),
        paths=("/jobs/", "/requisition/", "/career", "/apply"),
        query_params=("jobId", "requisitionId"),
    ),
    ATSType.GREENHOUSE: DomainPattern(
        domains=("greenhouse.io", "boards.greenhouse.io"),
        patterns=(r"\.greenhouse\.io$", r"boards\.greenhouse\.io$"),
        paths=("/jobs/", "/job/", "/apply/"),
        query_params=("job_id", "application_id"),
    ),
    ATSType.LEVER: DomainPattern(
        domains=("lever.co", "jobs.lever.co"),
        patterns=(r"jobs\.lever\.co$", r"\w+\.jobs\.lever\.co$"),
        paths=("/jobs/", "/apply/"),
        query_params=("lever-source",),
    ),
    ATSType.BAMBOOHR: DomainPattern(
        domains=("bamboohr.com",),
        patterns=(r"\w+\.bamboohr\.com$",),
        paths=("/jobs/", "/careers/"),
        query_params=("jobId",),
    ),
}

JOB_APPLICATION_PATHS = (
    "/apply", "/application", "/job/", "/jobs/", "/career", "/careers/",
    "/requisition", "/opening", "/position", "/vacancy",
)
JOB_APPLICATION_PARAMS = (
    "jobId", "job_id", "requisitionId", "positionId", "position_id",
    "opening_id", "application_id", "apply",
)


def parse_url(url: str) -> Optional[SplitResult]:
    """Split an absolute URL; None when it has no scheme or host."""
    try:
        parts = urlsplit(url)
        if not parts.scheme or not parts.hostname:
            return None
    except (ValueError, TypeError, AttributeError):
        return None
    return parts


def matches_domain(hostname: str, domains: tuple[str, ...]) -> bool:
    """Exact domain or any subdomain of it."""
    return any(hostname == d or hostname.endswith(f".{d}") for d in domains)


def _matches_regex(hostname: str, patterns: tuple[str, ...]) -> bool:
    return any(re.search(p, hostname) for p in patterns)


def _matches_path(path: str, paths: tuple[str, ...]) -> bool:
    return any(p.lower() in path for p in paths)


def _matches_query(parts: SplitResult, params: tuple[str, ...]) -> bool:
    present = parse_qs(parts.query, keep_blank_values=True)
    return any(p in present for p in params)


def _has_vendor_hint(hostname: str, domains: tuple[str, ...]) -> bool:
    return any(d.split(".")[0] in hostname for d in domains)


def matches_domain_pattern(url: str, pattern: DomainPattern) -> bool:
    """True when the URL's host, or host hint plus path/query, fits the pattern."""
    parts = parse_url(url)
    if parts is None:
        return False
    hostname = parts.hostname.lower()
    path = parts.path.lower()

    if matches_domain(hostname, pattern.domains):
        return True
    if _matches_regex(hostname, pattern.patterns):
        return True
    if _has_vendor_hint(hostname, pattern.domains):
        return _matches_path(path, pattern.paths) or _matches_query(parts, pattern.query_params)
    return False


def get_match_confidence(url: str, pattern: DomainPattern) -> float:
    """Sum of matching signals, capped at 1.0."""
    parts = parse_url(url)
    if parts is None:
        return 0.0
    hostname = parts.hostname.lower()

    confidence = 0.0
    if matches_domain(hostname, pattern.domains):
        confidence += 0.9
    if _matches_regex(hostname, pattern.patterns):
        confidence += 0.8
    if _matches_path(parts.path.lower(), pattern.paths):
        confidence += 0.3
    if _matches_query(parts, pattern.query_params):
        confidence += 0.2
    if _has_vendor_hint(hostname, pattern.domains):
        confidence += 0.1
    return min(1.0, confidence)


def find_best_vendor_match(url: str) -> VendorMatch:
    """Highest-confidence vendor for a URL, UNKNOWN when nothing matches."""
    best = VendorMatch(ATSType.UNKNOWN, 0.0)
    for vendor, pattern in VENDOR_DOMAIN_PATTERNS.items():
        confidence = get_match_confidence(url, pattern)
        if confidence > best.confidence:
            best = VendorMatch(vendor, confidence)
    return best


def is_job_application_url(url: str) -> bool:
    parts = parse_url(url)
    if parts is None:
        return False
    path = parts.path.lower()
    if any(p in path for p in JOB_APPLICATION_PATHS):
        return True
    return _matches_query(parts, JOB_APPLICATION_PARAMS)


def validate_domain_pattern(pattern: DomainPattern) -> list[str]:
    """List problems with a domain pattern; empty when well-formed."""
    errors = []
    if not pattern.domains:
        errors.append("At least one domain must be specified")
    for i, domain in enumerate(pattern.domains):
        if not domain or not domain.strip():
            errors.append(f"Domain at index {i} is empty")
        elif "/" in domain or "?" in domain:
            errors.append(f"Domain at index {i} should not contain paths or query parameters")
    for i, regex in enumerate(pattern.patterns):
        try:
            re.compile(regex)
        except re.error:
            errors.append(f"Regex pattern at index {i} is invalid")
    return errors


class ATSDetector:
    """Detects ATS type from a page URL."""

    def __init__(self, min_confidence: float = 0.5) -> None:
        self._min_confidence = min_confidence

    def detect(self, url: str) -> ATSType:
        """Best vendor for the URL, or UNKNOWN below the confidence floor."""
        match = find_best_vendor_match(url)
        if match.vendor != ATSType.UNKNOWN and match.confidence >= self._min_confidence:
            logger.info(f"ATS detected from URL: {match.vendor.value} ({match.confidence:.2f})")
            return match.vendor

        logger.debug(f"Could not detect ATS type for {url}")
        return ATSType.UNKNOWN
