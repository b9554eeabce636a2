from __future__ import annotations

# GH operations (release create)
GH_TIMEOUT_SECONDS = 60.0

# Asset upload: six binaries over a possibly slow link
GH_UPLOAD_TIMEOUT_SECONDS = 15 * 60.0

# One `go build` invocation
GO_BUILD_TIMEOUT_SECONDS = 30 * 60.0
