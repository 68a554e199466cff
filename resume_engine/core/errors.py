from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EvaluationErrorCode(str, Enum):
    # input / parsing
    PARSING_FAILED = "PARSING_FAILED"
    INVALID_FORMAT = "INVALID_FORMAT"
    UNSUPPORTED_FORMAT = "UNSUPPORTED_FORMAT"
    CORRUPT_FILE = "CORRUPT_FILE"
    NO_CONTENT = "NO_CONTENT"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    CONTENT_TOO_SHORT = "CONTENT_TOO_SHORT"
    NO_TEXT_EXTRACTED = "NO_TEXT_EXTRACTED"
    IMAGE_ONLY_PDF = "IMAGE_ONLY_PDF"
    ENCRYPTED_PDF = "ENCRYPTED_PDF"
    # validation
    VALIDATION_ERROR = "VALIDATION_ERROR"
    MISSING_RESUME = "MISSING_RESUME"
    MISSING_JOB_DESCRIPTION = "MISSING_JOB_DESCRIPTION"
    INVALID_INPUT = "INVALID_INPUT"
    # scoring / analysis
    SCORING_FAILED = "SCORING_FAILED"
    DIMENSION_CALCULATION_FAILED = "DIMENSION_CALCULATION_FAILED"
    GAP_ANALYSIS_FAILED = "GAP_ANALYSIS_FAILED"
    JOB_PARSING_FAILED = "JOB_PARSING_FAILED"
    # system
    INTERNAL_ERROR = "INTERNAL_ERROR"
    TIMEOUT = "TIMEOUT"
    CACHE_ERROR = "CACHE_ERROR"


@dataclass(frozen=True)
class ErrorMessage:
    title: str
    message: str
    suggestion: str
    status_code: int


ERROR_MESSAGES: dict[EvaluationErrorCode, ErrorMessage] = {
    EvaluationErrorCode.PARSING_FAILED: ErrorMessage(
        title="Unable to Read Resume",
        message="We ran into a problem reading your resume. Some PDF exports and file types cause this.",
        suggestion="Save the resume as a new PDF or as plain text (.txt) and upload it again.",
        status_code=422,
    ),
    EvaluationErrorCode.INVALID_FORMAT: ErrorMessage(
        title="Invalid File Format",
        message="The uploaded file is not in a supported format. PDF, Word (.docx) and plain text are supported.",
        suggestion="Upload the resume as a PDF, a Word document (.docx) or a plain text file (.txt).",
        status_code=415,
    ),
    EvaluationErrorCode.UNSUPPORTED_FORMAT: ErrorMessage(
        title="Unsupported File Type",
        message="This file type cannot be processed. Older .doc files, .odt files and images are not supported.",
        suggestion="Convert the resume to PDF or .docx with Word, Google Docs or an online converter.",
        status_code=415,
    ),
    EvaluationErrorCode.CORRUPT_FILE: ErrorMessage(
        title="File Appears Damaged",
        message="The uploaded file looks corrupted. This can happen during transfer or when the source file is damaged.",
        suggestion="Export the resume again from its original source and upload the new file.",
        status_code=422,
    ),
    EvaluationErrorCode.NO_CONTENT: ErrorMessage(
        title="No Content Found",
        message="No readable content was found. The file may be empty or contain only images.",
        suggestion="Make sure the resume contains selectable text. Design tools should export with embedded text.",
        status_code=422,
    ),
    EvaluationErrorCode.FILE_TOO_LARGE: ErrorMessage(
        title="File Too Large",
        message="The resume exceeds the size limit. Large files usually carry high-resolution images or heavy formatting.",
        suggestion="Compress the PDF or simplify its formatting, then upload it again.",
        status_code=413,
    ),
    EvaluationErrorCode.CONTENT_TOO_SHORT: ErrorMessage(
        title="Resume Too Short",
        message="The resume has very little content. Effective resumes usually run to at least 200-300 words.",
        suggestion="Add detail to your experience, skills and achievements, including quantified results.",
        status_code=422,
    ),
    EvaluationErrorCode.NO_TEXT_EXTRACTED: ErrorMessage(
        title="No Text Could Be Extracted",
        message="No text could be extracted. Scanned documents and image-based PDFs often cause this.",
        suggestion="Use a resume created in a word processor, or run OCR on the scanned document first.",
        status_code=422,
    ),
    EvaluationErrorCode.IMAGE_ONLY_PDF: ErrorMessage(
        title="Image-Based PDF Detected",
        message="The PDF contains images but no selectable text, which is common for scans and screenshots.",
        suggestion="Build the resume in Word, Google Docs or a resume builder and export it to PDF.",
        status_code=422,
    ),
    EvaluationErrorCode.ENCRYPTED_PDF: ErrorMessage(
        title="Protected PDF",
        message="The PDF is password-protected or encrypted, so its contents cannot be read.",
        suggestion="Remove the password protection or export an unprotected copy before uploading.",
        status_code=422,
    ),
    EvaluationErrorCode.VALIDATION_ERROR: ErrorMessage(
        title="Invalid Input",
        message="Some of the information provided did not pass validation.",
        suggestion="Check that all required fields are filled in correctly and try again.",
        status_code=400,
    ),
    EvaluationErrorCode.MISSING_RESUME: ErrorMessage(
        title="No Resume Provided",
        message="The request did not include a resume.",
        suggestion="Provide your resume before requesting an evaluation.",
        status_code=400,
    ),
    EvaluationErrorCode.MISSING_JOB_DESCRIPTION: ErrorMessage(
        title="No Job Description Provided",
        message="Fit analysis needs a job description, but none was provided.",
        suggestion="Paste the full job description text to get a personalized fit analysis.",
        status_code=400,
    ),
    EvaluationErrorCode.INVALID_INPUT: ErrorMessage(
        title="Invalid Input Data",
        message="The provided input data is invalid or malformed.",
        suggestion="Check the inputs and make sure all required information is present.",
        status_code=400,
    ),
    EvaluationErrorCode.SCORING_FAILED: ErrorMessage(
        title="Scoring Error",
        message="An error occurred while calculating the resume score. This is usually temporary.",
        suggestion="Try again in a few moments. If it keeps happening, upload the resume again.",
        status_code=500,
    ),
    EvaluationErrorCode.DIMENSION_CALCULATION_FAILED: ErrorMessage(
        title="Analysis Error",
        message="One part of the resume analysis could not be completed.",
        suggestion="Upload the resume again. If the problem persists, try a different file format.",
        status_code=500,
    ),
    EvaluationErrorCode.GAP_ANALYSIS_FAILED: ErrorMessage(
        title="Gap Analysis Error",
        message="The comparison between your resume and the job description could not be completed.",
        suggestion="Make sure both the resume and the job description have enough content to compare.",
        status_code=500,
    ),
    EvaluationErrorCode.JOB_PARSING_FAILED: ErrorMessage(
        title="Job Description Error",
        message="The job description could not be parsed. It may be too short or unusually formatted.",
        suggestion="Paste the complete job description, including the requirements and responsibilities.",
        status_code=422,
    ),
    EvaluationErrorCode.INTERNAL_ERROR: ErrorMessage(
        title="Unexpected Error",
        message="Something went wrong on our side while evaluating the resume.",
        suggestion="Try again in a few minutes. If the problem continues, contact support.",
        status_code=500,
    ),
    EvaluationErrorCode.TIMEOUT: ErrorMessage(
        title="Request Timed Out",
        message="The evaluation took longer than expected, which can happen with very large resumes.",
        suggestion="Simplify the resume format or try again later.",
        status_code=504,
    ),
    EvaluationErrorCode.CACHE_ERROR: ErrorMessage(
        title="System Error",
        message="A temporary system issue occurred while processing the request.",
        suggestion="Try again. This usually resolves on its own.",
        status_code=503,
    ),
}


class EvaluationError(RuntimeError):
    def __init__(self, code: EvaluationErrorCode, details: Any = None):
        info = ERROR_MESSAGES[code]
        super().__init__(info.message)
        self.code = code
        self.title = info.title
        self.message = info.message
        self.suggestion = info.suggestion
        self.status_code = info.status_code
        self.details = details

    def to_user_friendly(self) -> dict[str, str]:
        return {
            "code": self.code.value,
            "title": self.title,
            "message": self.message,
            "suggestion": self.suggestion,
        }

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = self.to_user_friendly()
        payload["details"] = _describe_details(self.details)
        return payload


def _describe_details(details: Any) -> Any:
    if isinstance(details, BaseException):
        return f"{type(details).__name__}: {details}"
    return details


def create_error(code: EvaluationErrorCode, details: Any = None) -> EvaluationError:
    return EvaluationError(code, details)


def is_evaluation_error(error: object) -> bool:
    return isinstance(error, EvaluationError)


def get_user_friendly_error(error: BaseException) -> dict[str, str]:
    """User-facing payload for any exception; unknown errors collapse to INTERNAL_ERROR."""
    if isinstance(error, EvaluationError):
        return error.to_user_friendly()
    return EvaluationError(EvaluationErrorCode.INTERNAL_ERROR).to_user_friendly()


def to_evaluation_error(
    error: BaseException,
    fallback_code: EvaluationErrorCode = EvaluationErrorCode.INTERNAL_ERROR,
) -> EvaluationError:
    if isinstance(error, EvaluationError):
        return error
    return EvaluationError(fallback_code, details=error)


@contextmanager
def error_boundary(
    fallback_code: EvaluationErrorCode = EvaluationErrorCode.INTERNAL_ERROR,
) -> Iterator[None]:
    """Re-raise anything that is not an EvaluationError as one with ``fallback_code``."""
    try:
        yield
    except EvaluationError:
        raise
    except Exception as exc:
        raise EvaluationError(fallback_code, details=exc) from exc


def with_error_handling(
    fn: Callable[[], T],
    fallback_code: EvaluationErrorCode = EvaluationErrorCode.INTERNAL_ERROR,
) -> T:
    with error_boundary(fallback_code):
        return fn()


def log_error(error: EvaluationError, context: str | None = None) -> None:
    logger.error(
        "evaluation_error context=%s code=%s title=%s details=%s",
        context or "error",
        error.code.value,
        error.title,
        _describe_details(error.details),
    )
