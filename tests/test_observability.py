from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.testclient import TestClient

from bucket_gateway.infra.observability.metrics import metrics_app
from bucket_gateway.infra.observability.middleware import MetricsMiddleware


def build_app(*, trace_http: bool = False) -> FastAPI:
    app = FastAPI()
    app.add_middleware(MetricsMiddleware, trace_http=trace_http)

    @app.get("/uploads/{upload_id}")
    def get_upload(upload_id: str):
        return {"id": upload_id}

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.post("/echo")
    async def echo(request: Request):
        body = await request.json()
        return JSONResponse(
            {
                "ok": True,
                "signedUrl": body.get("signedUrl"),
                "secret": body.get("secret"),
            }
        )

    app.mount("/metrics", metrics_app)
    return app


def test_metrics_route_template_label():
    client = TestClient(build_app())
    # object keys and upload ids must not leak into labels
    resp = client.get("/uploads/abc-123")
    assert resp.status_code == 200

    m = client.get("/metrics")
    assert m.status_code == 200
    assert "http_requests_total" in m.text
    assert 'route="/uploads/{upload_id}"' in m.text
    assert "abc-123" not in m.text


def test_latency_metric_present():
    client = TestClient(build_app())
    client.get("/uploads/456")
    m = client.get("/metrics")
    assert m.status_code == 200
    assert "http_request_duration_seconds" in m.text
    assert 'route="/uploads/{upload_id}"' in m.text


def test_request_id_propagation():
    client = TestClient(build_app())

    r1 = client.get("/health")
    rid1 = r1.headers.get("X-Request-Id")
    assert rid1 is not None and len(rid1) > 0

    rid = "req-abc-123"
    r2 = client.get("/health", headers={"X-Request-Id": rid})
    assert r2.headers.get("X-Request-Id") == rid


def test_trace_masks_secrets_and_signatures(caplog):
    client = TestClient(build_app(trace_http=True))
    signed = (
        "https://s3.example.com/bucket/a.bin?partNumber=1"
        "&X-Amz-Credential=AKIAEXAMPLE&X-Amz-Signature=deadbeef"
    )

    with caplog.at_level("INFO"):
        r = client.post("/echo", json={"signedUrl": signed, "secret": "hunter2"})
        assert r.status_code == 200

    records = [
        rec
        for rec in caplog.records
        if rec.name == "http" and "request" in rec.getMessage()
    ]
    assert records, "should capture http logs"
    rec = records[-1]
    assert hasattr(rec, "extra") and isinstance(rec.extra, dict)
    for field in ("request_body", "response_body"):
        body = rec.extra.get(field) or ""
        assert "***" in body
        assert "hunter2" not in body
        assert "deadbeef" not in body


def test_trace_masks_signature_in_plain_text():
    middleware = MetricsMiddleware(FastAPI(), trace_http=True)

    masked = middleware._mask_text("url=https://x/y?X-Amz-Signature=abc123&a=1")

    assert "abc123" not in masked
    assert "X-Amz-Signature=***" in masked
    assert "a=1" in masked


def test_trace_truncates_long_bodies():
    middleware = MetricsMiddleware(FastAPI(), trace_http=True)

    masked = middleware._mask_body(b"x" * 5000)

    assert masked.endswith("...<truncated>")
    assert len(masked) < 2100
