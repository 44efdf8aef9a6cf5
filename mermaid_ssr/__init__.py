"""mermaid-ssr: render mermaid diagrams in Markdown to inline SVG at build time."""

__version__ = "0.1.0"
