"""AutoML wizard plugin."""

manifest = {
    "title": "AutoML Wizard",
    "summary": (
        "Upload a CSV, impute missing values, pick a target and features, "
        "train a gradient-descent linear regression and review its metrics."
    ),
    "blueprint": "automl_wizard",
    "category": "Machine Learning",
}


__all__ = ["manifest"]
