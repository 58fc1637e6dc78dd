# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fusebroker/utils/templates.py
from pathlib import Path
from typing import Any, Dict, List

import yaml
from jinja2 import Environment, FileSystemLoader, StrictUndefined


class TemplateRenderer:
    def __init__(self, templates_dir: Path):
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )

    def render(self, template_name: str, context: dict) -> str:
        tmpl = self.env.get_template(template_name)
        return tmpl.render(**context)

    def render_manifest(self, template_name: str, context: dict) -> Dict[str, Any]:
        """Render a single-document YAML template into a dict."""
        return yaml.safe_load(self.render(template_name, context))

    def render_manifests(self, template_name: str, context: dict) -> List[Dict[str, Any]]:
        """Render a multi-document YAML template, skipping empty documents."""
        docs = yaml.safe_load_all(self.render(template_name, context))
        return [d for d in docs if d]
