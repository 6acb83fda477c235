"""recstream

Build chains of record stages in-process and run them against one input:

    from recstream import recs

    table = (
        recs()
        .fromcsv("--header", "people.csv")
        .grep(lambda r: int(r["age"]) >= 21)
        .sort("--key", "income=-numeric")
        .totable()
        .run()
    )

The chain kernel lives in `chainkit`; this package supplies the built-in stages,
their snippet language, YAML pipeline files and the command line.
"""

from recstream.pipeline import RecsPipeline, default_runner, recs

__all__ = ["RecsPipeline", "__version__", "default_runner", "recs"]
__version__ = "0.1.0"
