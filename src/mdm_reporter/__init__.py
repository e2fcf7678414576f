"""MDM Reporter: policy correlation and reporting for MDM diagnostic exports."""

__version__ = "0.1.0"
