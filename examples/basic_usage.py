"""Basic usage examples for sentimeter."""

from sentimeter import AnalysisExecutionContext, create_executor, settings
from sentimeter.core.models import ResultSet
from sentimeter.services.mturk_client import MechanicalTurkClient, MechanicalTurkSettings
from sentimeter.utils.data_prep import write_report


def show_progress(provider, event):
    print(f"  {provider}: {event.status.value} {event.progress}%")


def example_machine_providers():
    """Example: score a tiny corpus with two machine providers."""
    print("Analyzing three documents with Chatterbox and Viralheat")

    documents = {
        "doc-1": ResultSet("I love this phone, the battery lasts forever."),
        "doc-2": ResultSet("Worst customer service I have ever dealt with."),
        "doc-3": ResultSet("The package arrived on Tuesday."),
    }

    for provider, key in (("Chatterbox", settings.chatterbox_api_key), ("Viralheat", settings.viralheat_api_key)):
        context = AnalysisExecutionContext(documents, key=key, language="English", on_progress=show_progress)
        summary = create_executor(provider).execute(context)
        print(f"{provider}: processed {summary.processed}, failed {summary.failed}")

    for doc_id, result in documents.items():
        print(f"{doc_id},{result}")

    write_report("machine_report.csv", documents)


def example_human_raters():
    """Example: submit the corpus to Mechanical Turk and collect it later."""
    print("\nSubmitting two documents to Mechanical Turk")

    documents = {
        "doc-1": ResultSet("Great value for the money."),
        "doc-2": ResultSet("It broke after two days."),
    }
    hit_settings = MechanicalTurkSettings(assignments=3, locale="United States")
    context = AnalysisExecutionContext(
        documents,
        key=settings.mturk_access_key,
        secret=settings.mturk_secret_key,
        custom_field=hit_settings,
        on_progress=show_progress,
    )

    client = MechanicalTurkClient()
    client.execute(context)
    # Later, once workers have answered
    client.collect(context)

    for doc_id, result in documents.items():
        print(f"{doc_id}: {result.get_polarity('MechanicalTurk')} ({result.get_confidence('MechanicalTurk'):.2f})")


if __name__ == "__main__":
    example_machine_providers()
    example_human_raters()
