# repolens/detection.py
"""Best-effort framework and architecture detection.

Nothing here is verified against the code's real structure.  Frameworks are
recognised from signature regexes over file contents plus a few marker
files and manifest dependencies; architecture labels and pattern tags come
from substrings that co-occur in the repository's path list.
"""

from __future__ import annotations

import re
from pathlib import PurePosixPath
from typing import Iterable, List, Pattern, Sequence, Tuple

from .models import FileEntry, ParsedFile, PatternSummary

__all__ = [
    "FRAMEWORK_SIGNATURES",
    "detect_frameworks",
    "detect_architecture",
    "detect_patterns",
]

# ---------------------------------------------------------------------------
# Framework tables
# ---------------------------------------------------------------------------

# Checked in order; a framework is recorded on the first file that matches.
FRAMEWORK_SIGNATURES: Sequence[Tuple[str, Pattern[str]]] = (
    ("React", re.compile(r"import.*from ['\"]react['\"]")),
    ("Vue", re.compile(r"import.*from ['\"]vue['\"]")),
    ("Angular", re.compile(r"@angular|ng-|angular\.module")),
    ("Express", re.compile(r"express\(\)|app\.get|app\.post|router\.|const\s+express|require\(['\"]express['\"]\)")),
    ("Next.js", re.compile(r"next/|getServerSideProps|getStaticProps")),
    ("Svelte", re.compile(r"svelte|\.svelte")),
    ("Node.js", re.compile(r"require\(|module\.exports|process\.env|const\s+\w+\s*=\s*require")),
    ("TypeScript", re.compile(r"interface\s+\w+|type\s+\w+\s*=|\.ts$|\.tsx$")),
    ("Fastify", re.compile(r"fastify|\.register\(|\.listen\(")),
    ("Koa", re.compile(r"const\s+Koa|require\(['\"]koa['\"]\)|ctx\.body")),
    ("NestJS", re.compile(r"@nestjs|@Controller|@Injectable|@Module")),
    ("Django", re.compile(r"from\s+django|django\.contrib|models\.Model")),
    ("Flask", re.compile(r"from\s+flask|Flask\(__name__\)|@app\.route")),
    ("FastAPI", re.compile(r"from\s+fastapi|FastAPI\(|@app\.(?:get|post|put|delete)")),
    ("Spring Boot", re.compile(r"@SpringBootApplication|@RestController|@Service|@Repository")),
    ("ASP.NET", re.compile(r"using\s+Microsoft\.AspNetCore|Controller|ActionResult")),
    ("GraphQL", re.compile(r"graphql|type\s+Query|type\s+Mutation|apollo")),
    ("Socket.io", re.compile(r"socket\.io|io\(|socket\.on|socket\.emit")),
    ("Prisma", re.compile(r"prisma|@prisma/client|\$\w+\.findMany")),
    ("MongoDB", re.compile(r"mongoose|MongoClient|\.find\(\)|\.insertOne")),
    ("Redis", re.compile(r"redis|\.set\(|\.get\(|RedisClient")),
)

# Manifest dependency name -> framework.
DEPENDENCY_MARKERS: Sequence[Tuple[str, str]] = (
    ("react", "React"),
    ("vue", "Vue"),
    ("@angular/core", "Angular"),
    ("next", "Next.js"),
    ("vite", "Vite"),
    ("express", "Express"),
    ("django", "Django"),
    ("flask", "Flask"),
    ("fastapi", "FastAPI"),
)

# Lower-cased file name (``*`` suffix = any extension) -> framework.
FILENAME_MARKERS: Sequence[Tuple[str, str]] = (
    ("next.config.*", "Next.js"),
    ("vite.config.*", "Vite"),
    ("manage.py", "Django"),
    ("pom.xml", "Spring Boot"),
    ("build.gradle", "Spring Boot"),
    ("go.mod", "Go"),
    ("cargo.toml", "Rust"),
    ("package.json", "Node.js"),
)


def _name_matches(name: str, marker: str) -> bool:
    if marker.endswith(".*"):
        return name.startswith(marker[:-1])
    return name == marker


def _dedupe(names: Iterable[str]) -> List[str]:
    seen: List[str] = []
    for name in names:
        if name not in seen:
            seen.append(name)
    return seen


def detect_frameworks(files: Sequence[ParsedFile], entries: Sequence[FileEntry]) -> List[str]:
    """Framework names, content signatures first, then markers; no duplicates."""

    found: List[str] = []
    for framework, pattern in FRAMEWORK_SIGNATURES:
        if any(pattern.search(parsed.content) for parsed in files):
            found.append(framework)

    declared = {
        dep.lower()
        for parsed in files
        if parsed.manifest is not None
        for dep in parsed.manifest.dependencies + parsed.manifest.dev_dependencies
    }
    for dependency, framework in DEPENDENCY_MARKERS:
        if dependency in declared:
            found.append(framework)

    names = [PurePosixPath(entry.path).name.lower() for entry in entries if entry.type == "file"]
    for marker, framework in FILENAME_MARKERS:
        if any(_name_matches(name, marker) for name in names):
            found.append(framework)

    return _dedupe(found)


# ---------------------------------------------------------------------------
# Architecture rules
# ---------------------------------------------------------------------------


def detect_architecture(paths: Sequence[str]) -> Tuple[str, List[str]]:
    """Return ``(architecture, pattern tags)`` from path co-occurrence.

    Rules run in a fixed order and a later architecture rule overrides an
    earlier one, so the result is deterministic.
    """

    lowered = [path.lower() for path in paths]

    def present(*needles: str) -> bool:
        return all(any(needle in path for path in lowered) for needle in needles)

    def either(*needles: str) -> bool:
        return any(needle in path for path in lowered for needle in needles)

    architecture = "Unknown"
    patterns: List[str] = []

    if present("components", "pages"):
        architecture = "Component-Based"
        patterns.append("Component Architecture")
    if present("controllers", "models", "views"):
        architecture = "MVC"
        patterns.append("Model-View-Controller")
    if present("services", "components"):
        patterns.append("Service Layer Pattern")
    if either("store", "redux", "vuex"):
        patterns.append("State Management")
    if either("middleware"):
        patterns.append("Middleware Pattern")
    if either("api", "routes"):
        patterns.append("REST API")
    if either("graphql"):
        patterns.append("GraphQL")
    if sum(1 for path in lowered if "service" in path) > 3:
        patterns.append("Microservices")
    if present("domain", "infrastructure", "application"):
        architecture = "Clean Architecture"
        patterns.append("Clean Architecture")

    return architecture, patterns


def detect_patterns(files: Sequence[ParsedFile], entries: Sequence[FileEntry]) -> PatternSummary:
    """Pure function of the parsed files and the raw listing."""

    architecture, patterns = detect_architecture([entry.path for entry in entries])
    return PatternSummary(
        architecture=architecture,
        framework=detect_frameworks(files, entries),
        patterns=patterns,
    )
