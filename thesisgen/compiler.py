"""
Remote PDF compilation.

The generated ``main.tex`` and ``references.bib`` are posted to a short,
fixed list of public LaTeX compile services. Services are tried one at a
time, in order; the first one that answers 2xx with a PDF wins. If every
service fails the status is FAILED but still carries the LaTeX source so the
user can compile it by hand.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

import httpx

from . import config
from .latex import MAIN_TEX, REFERENCES_BIB
from .models import CompilationState, CompilationStatus, CompileAttempt

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"


@dataclass(frozen=True)
class CompileService:
    name: str
    url: str
    file_field: str
    compiler: str = "pdflatex"


COMPILE_SERVICES = (
    CompileService(name="LaTeX.Online", url="https://latex.ytotech.com/builds/sync", file_field="resources"),
    CompileService(name="LaTeXOnline.cc", url="https://latexonline.cc/compile", file_field="files[]"),
)


class CompileServiceError(Exception):
    """A single compile service rejected the request or returned something other than a PDF."""


class CompilationClient:
    def __init__(
        self,
        services: Sequence[CompileService] = COMPILE_SERVICES,
        timeout: float = config.HTTP_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.services = list(services)
        self.timeout = timeout
        self.transport = transport

    async def compile(
        self,
        files: Dict[str, str],
        on_progress: Optional[Callable[[CompilationStatus], None]] = None,
    ) -> CompilationStatus:
        """
        Walks the service list until one returns a PDF.
        ``files`` is the mapping produced by ``latex.generate_latex_files``;
        ``on_progress`` receives an IN_PROGRESS status before each attempt.
        """
        latex_code = files[MAIN_TEX]
        attempts: List[CompileAttempt] = []
        last_error = "no compile services configured"

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            for service in self.services:
                logger.info(f"Trying {service.name} compilation service...")
                if on_progress is not None:
                    on_progress(
                        CompilationStatus(
                            state=CompilationState.IN_PROGRESS,
                            message=f"Trying {service.name} compilation service...",
                            latex_code=latex_code,
                            attempts=list(attempts),
                        )
                    )
                try:
                    pdf = await self._compile_with(client, service, files)
                except (httpx.HTTPError, CompileServiceError) as e:
                    last_error = str(e) or e.__class__.__name__
                    logger.warning(f"{service.name} failed: {last_error}")
                    attempts.append(CompileAttempt(service=service.name, ok=False, error=last_error))
                    continue

                attempts.append(CompileAttempt(service=service.name, ok=True))
                logger.info(f"PDF compiled by {service.name} ({len(pdf)} bytes)")
                return CompilationStatus(
                    state=CompilationState.SUCCESS,
                    message=f"PDF compiled successfully using {service.name}! Click to download your thesis.",
                    service=service.name,
                    pdf=pdf,
                    latex_code=latex_code,
                    attempts=attempts,
                )

        logger.error(f"All compilation services failed. Last error: {last_error}")
        return CompilationStatus(
            state=CompilationState.FAILED,
            message=(
                f"Compilation failed: All compilation services failed. Last error: {last_error}. "
                "You can still download the LaTeX source files to compile manually."
            ),
            latex_code=latex_code,
            attempts=attempts,
        )

    async def _compile_with(self, client: httpx.AsyncClient, service: CompileService, files: Dict[str, str]) -> bytes:
        multipart = [
            (service.file_field, (name, files[name].encode("utf-8"), "text/plain"))
            for name in (MAIN_TEX, REFERENCES_BIB)
        ]
        response = await client.post(
            service.url,
            data={"compiler": service.compiler},
            files=multipart,
            headers={"Accept": PDF_CONTENT_TYPE},
        )

        if not response.is_success:
            raise CompileServiceError(f"HTTP {response.status_code}: {response.text}")

        content_type = response.headers.get("content-type", "")
        if PDF_CONTENT_TYPE not in content_type:
            raise CompileServiceError(f"Invalid response type: {content_type or 'missing'}")
        return response.content
