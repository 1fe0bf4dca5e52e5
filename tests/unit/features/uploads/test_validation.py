from pathlib import Path

import pytest

from core.exceptions import AuthenticationError, StagingError, ValidationError
from features.uploads.schemas import Submission
from features.uploads.validation import identifier_filename, secrets_match, validate_submission
from services.temporary_storage import StagedFile, StagingArea

pytestmark = pytest.mark.anyio


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


async def _stage(staging: StagingArea, name: str, body: bytes = b"data") -> StagedFile:
    writer = await staging.open_file(name)
    await writer.write(body)
    await writer.close()
    return writer.staged


def test_secrets_match():
    assert secrets_match("letmein", "letmein") is True
    assert secrets_match("letmein ", "letmein") is False
    assert secrets_match("", "letmein") is False
    assert secrets_match("", "") is False
    assert secrets_match("anything", "") is False


@pytest.mark.parametrize(
    ("identifier", "original", "expected"),
    [
        ("summary", "report.pdf", "summary.pdf"),
        ("summary", "report", "summary"),
        ("summary", "archive.tar.gz", "summary.gz"),
        ("summary", ".bashrc", "summary"),
    ],
)
def test_identifier_filename(identifier, original, expected):
    assert identifier_filename(identifier, original) == expected


async def test_wrong_secret_is_rejected_before_anything_else(staging_root: Path):
    staging = StagingArea(staging_root)
    staged = await _stage(staging, "report.pdf")
    submission = Submission(files=[staged], identifier="renamed", password="wrong")

    with pytest.raises(AuthenticationError):
        await validate_submission(submission, expected_secret="letmein", staging=staging)

    assert staged.name == "report.pdf"


async def test_unconfigured_secret_never_authorises(staging_root: Path):
    staging = StagingArea(staging_root)
    submission = Submission(files=[await _stage(staging, "a.txt")], password="")

    with pytest.raises(AuthenticationError):
        await validate_submission(submission, expected_secret="", staging=staging)


async def test_identifier_renames_single_file(staging_root: Path):
    staging = StagingArea(staging_root)
    staged = await _stage(staging, "report.pdf", b"%PDF")
    submission = Submission(files=[staged], identifier="  q3-summary ", password="letmein")

    await validate_submission(submission, expected_secret="letmein", staging=staging)

    assert staged.name == "q3-summary.pdf"
    assert staged.path.read_bytes() == b"%PDF"
    assert staged.original_name == "report.pdf"


async def test_identifier_without_extension(staging_root: Path):
    staging = StagingArea(staging_root)
    staged = await _stage(staging, "report")
    submission = Submission(files=[staged], identifier="final", password="letmein")

    await validate_submission(submission, expected_secret="letmein", staging=staging)

    assert staged.name == "final"


async def test_identifier_ignored_for_several_files(staging_root: Path):
    staging = StagingArea(staging_root)
    first = await _stage(staging, "a.txt")
    second = await _stage(staging, "b.txt")
    submission = Submission(files=[first, second], identifier="combined", password="letmein")

    await validate_submission(submission, expected_secret="letmein", staging=staging)

    assert [first.name, second.name] == ["a.txt", "b.txt"]


async def test_blank_identifier_is_ignored(staging_root: Path):
    staging = StagingArea(staging_root)
    staged = await _stage(staging, "a.txt")
    submission = Submission(files=[staged], identifier="   ", password="letmein")

    await validate_submission(submission, expected_secret="letmein", staging=staging)

    assert staged.name == "a.txt"


async def test_no_files_is_a_validation_error(staging_root: Path):
    staging = StagingArea(staging_root)

    with pytest.raises(ValidationError) as exc_info:
        await validate_submission(
            Submission(identifier="x", password="letmein"),
            expected_secret="letmein",
            staging=staging,
        )

    assert exc_info.value.message == "No file uploaded"
    assert exc_info.value.field == "file"


async def test_failed_rename_surfaces_staging_error(staging_root: Path):
    staging = StagingArea(staging_root)
    staged = await _stage(staging, "a.txt")
    staged.path.unlink()
    submission = Submission(files=[staged], identifier="b", password="letmein")

    with pytest.raises(StagingError):
        await validate_submission(submission, expected_secret="letmein", staging=staging)
