"""
HAR to JMeter - Turn captured browser traffic into Apache JMeter test plans.

This package provides tools for:
- Decoding HAR documents and summarizing their entries
- LLM-powered JMX generation through OpenAI or Google AI Studio
- Extracting and validating the JMeter XML returned by the model
- Serving the conversion as an HTTP function
"""

__version__ = "1.0.0"
