from features.uploads.rendering import UPLOAD_FORM_HTML, render_message, render_outcomes
from features.uploads.schemas import PublishedObject, UploadFailure, UploadResultItem


def test_form_has_every_field():
    assert 'action="/upload"' in UPLOAD_FORM_HTML
    assert 'enctype="multipart/form-data"' in UPLOAD_FORM_HTML
    assert 'name="file"' in UPLOAD_FORM_HTML and "multiple" in UPLOAD_FORM_HTML
    for field in ("identifier", "ttl_value", "ttl_unit", "password"):
        assert f'name="{field}"' in UPLOAD_FORM_HTML
    assert 'value="minutes"' in UPLOAD_FORM_HTML
    assert 'value="hours"' in UPLOAD_FORM_HTML


def test_render_outcomes_joins_paragraphs_with_rules():
    html = render_outcomes(
        [
            PublishedObject(key="a.txt", retrieval_url="https://s3.test/a.txt?sig=1&x=2", ttl_seconds=60),
            UploadFailure(filename="b.txt", error="Failed to upload b.txt: AccessDenied"),
        ]
    )

    first, second = html.split("<hr>")
    assert first == (
        "<p>File: a.txt uploaded successfully! "
        "<br>Download: <a href='https://s3.test/a.txt?sig=1&amp;x=2'>https://s3.test/a.txt?sig=1&amp;x=2</a> "
        "<br>Expires in: 60 seconds</p>"
    )
    assert second == "<p>Upload failed for b.txt: Failed to upload b.txt: AccessDenied</p>"


def test_render_outcomes_escapes_client_supplied_names():
    html = render_outcomes([UploadFailure(filename="<script>.txt", error="bad")])

    assert "<script>" not in html
    assert "&lt;script&gt;.txt" in html


def test_zero_ttl_reads_as_never_expiring():
    html = render_outcomes([PublishedObject(key="a.txt", retrieval_url="https://s3.test/a", ttl_seconds=0)])

    assert "Expires in: never" in html


def test_render_message():
    assert render_message("No file uploaded") == "<p>No file uploaded</p>"


def test_upload_result_item_from_outcome():
    published = UploadResultItem.from_outcome(
        PublishedObject(key="a.txt", retrieval_url="https://s3.test/a", ttl_seconds=60)
    )
    failed = UploadResultItem.from_outcome(UploadFailure(filename="b.txt", error="boom"))

    assert published.model_dump() == {
        "status": "published",
        "filename": "a.txt",
        "url": "https://s3.test/a",
        "ttl_seconds": 60,
        "error": None,
    }
    assert failed.status == "failed"
    assert failed.url is None
    assert failed.error == "boom"
