"""
Project Export

Packages a project's files into a downloadable Vite + React + Tailwind
project archive.
"""
import io
import logging
import posixpath
import re
import zipfile
from abc import ABC, abstractmethod
from typing import Optional

logger = logging.getLogger(__name__)


PACKAGE_JSON = """{
  "name": "raillovable-export",
  "private": true,
  "version": "0.0.1",
  "scripts": {
    "dev": "vite",
    "build": "vite build",
    "preview": "vite preview"
  },
  "dependencies": {
    "react": "^18.3.1",
    "react-dom": "^18.3.1"
  },
  "devDependencies": {
    "@vitejs/plugin-react": "^4.2.1",
    "autoprefixer": "^10.4.19",
    "postcss": "^8.4.38",
    "tailwindcss": "^3.4.4",
    "vite": "^5.3.1"
  }
}
"""

VITE_CONFIG = """import { defineConfig } from 'vite'
import react from '@vitejs/plugin-react'

export default defineConfig({
  plugins: [react()],
})
"""

TAILWIND_CONFIG = """/** @type {import('tailwindcss').Config} */
export default {
  content: ["./index.html", "./src/**/*.{js,ts,jsx,tsx}"],
  theme: { extend: {} },
  plugins: [],
}
"""

POSTCSS_CONFIG = """export default {
  plugins: {
    tailwindcss: {},
    autoprefixer: {},
  },
}
"""

INDEX_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="UTF-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1.0" />
    <title>RailLovable Export</title>
  </head>
  <body>
    <div id="root"></div>
    <script type="module" src="/src/main.jsx"></script>
  </body>
</html>
"""

MAIN_JSX = """import React from 'react'
import ReactDOM from 'react-dom/client'
import App from './App'
import './index.css'

ReactDOM.createRoot(document.getElementById('root')).render(
  <React.StrictMode>
    <App />
  </React.StrictMode>,
)
"""

INDEX_CSS = """@tailwind base;
@tailwind components;
@tailwind utilities;
"""

RAILWAY_JSON = """{
  "$schema": "https://railway.com/railway.schema.json",
  "build": { "builder": "NIXPACKS" },
  "deploy": {
    "startCommand": "npm run preview -- --host --port $PORT",
    "healthcheckPath": "/"
  }
}
"""

PLACEHOLDER_APP = """export default function App() {
  return <div className="p-8 text-center">Start chatting to generate your app!</div>
}
"""


def archive_filename(project_name: str) -> str:
    """'My Landing  Page!' -> 'my-landing-page.zip' (ASCII only, safe for headers)"""
    slug = re.sub(r"\s+", "-", project_name.strip()).lower()
    slug = re.sub(r"[^a-z0-9._-]", "", slug) or "project"
    return f"{slug}.zip"


def safe_entry_path(path: str) -> Optional[str]:
    """
    Archive-relative form of a project path, or None if it would land
    outside src/ once extracted.
    """
    clean = posixpath.normpath(path.replace("\\", "/").lstrip("/"))
    if clean in (".", "") or clean.startswith("..") or posixpath.isabs(clean):
        return None
    return clean


class ProjectExporter(ABC):
    """Turns a project's authoritative FileSet into a packaged archive."""

    @abstractmethod
    def export_project(self, name: str, files: dict[str, str]) -> bytes:
        pass


class ZipProjectExporter(ProjectExporter):
    """
    Zip archive with a runnable scaffold.

    Project files land under src/ with their leading slash removed, and
    paths that would escape src/ are skipped. A placeholder App.tsx is
    added when the project has none.
    """

    def export_project(self, name: str, files: dict[str, str]) -> bytes:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
            zf.writestr("package.json", PACKAGE_JSON)
            zf.writestr("vite.config.js", VITE_CONFIG)
            zf.writestr("tailwind.config.js", TAILWIND_CONFIG)
            zf.writestr("postcss.config.js", POSTCSS_CONFIG)
            zf.writestr("index.html", INDEX_HTML)
            zf.writestr("railway.json", RAILWAY_JSON)
            zf.writestr(
                "README.md",
                f"# {name}\n\nBuilt with RailLovable.\n\n## Run\n\n```bash\nnpm install\nnpm run dev\n```\n",
            )
            zf.writestr("src/main.jsx", MAIN_JSX)
            zf.writestr("src/index.css", INDEX_CSS)

            written = set()
            for path, content in files.items():
                clean = safe_entry_path(path)
                if clean is None:
                    logger.warning(f"Skipping unsafe path {path!r} in export of {name!r}")
                    continue
                zf.writestr(f"src/{clean}", content)
                written.add(clean)

            if "App.tsx" not in written:
                zf.writestr("src/App.tsx", PLACEHOLDER_APP)

        logger.info(f"Exported {len(files)} files for {name!r}")
        return buffer.getvalue()


_exporter_instance: ProjectExporter = ZipProjectExporter()


def get_exporter() -> ProjectExporter:
    """The exporter used by the export endpoint."""
    return _exporter_instance
