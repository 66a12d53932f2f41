"""
Setup configuration for the project.
Allows the package to be installed in development mode.
"""

from setuptools import setup, find_packages

setup(
    name="invoice-capture",
    version="1.0.0",
    description="Extract structured data from Venezuelan invoices using Gemini, OCR.space or local recognition",
    author="Community Projects Accounting Team",
    packages=find_packages(include=["invoice_capture", "invoice_capture.*"]),
    py_modules=["main"],
    install_requires=[
        "requests>=2.31.0",
        "google-genai>=1.0.0",
        "pdfplumber>=0.10.0",
        "pdf2image>=1.16.3",
        "pytesseract>=0.3.10",
        "Pillow>=10.0.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "invoice-capture=main:main",
        ],
    },
    python_requires=">=3.8",
)
