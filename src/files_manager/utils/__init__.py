"""Cross-cutting helpers: task timing and dependency readiness."""
