"""User-facing failures of the review workflow.

Each error carries the title and description shown to the user. None of
them is fatal; the user restarts with `/review` or resubmits the form.
"""


class ReviewFlowError(Exception):
    title = "An error occurred."
    description = "An error occurred while processing your request. Please try again later."

    def __init__(self, description: str | None = None) -> None:
        if description is not None:
            self.description = description
        super().__init__(self.description)


class InvalidTransactionId(ReviewFlowError):
    title = "Invalid Transaction ID"
    description = "Transaction IDs are between 5 and 50 characters long."


class TransactionAlreadyUsed(ReviewFlowError):
    title = "Transaction ID already used."
    description = (
        "This Transaction ID has already been used to create a review. Each purchase can only have one review."
    )


class PaymentNotFound(ReviewFlowError):
    title = "Transaction/Payment ID not found."
    description = "Transaction/Payment ID not found. Please contact an administrator."


class NoProductsFound(ReviewFlowError):
    title = "No products found in this transaction."
    description = "No products found in this transaction. Please contact an administrator."


class SessionExpired(ReviewFlowError):
    title = "Session Expired"
    description = "Your review session has expired. Please use `/review` again to start over."


class StepOutOfOrder(ReviewFlowError):
    title = "Review Step Unavailable"
    description = "Please select **Submit Review** from the product summary before writing your review."


class InvalidRating(ReviewFlowError):
    title = "Invalid Rating"
    description = "Please enter a valid rating between 1 and 5."


class InvalidProductName(ReviewFlowError):
    title = "Invalid Product Name"
    description = "The product name cannot be modified."


class InvalidReviewText(ReviewFlowError):
    title = "Invalid Review"
    description = "Your review must be between 10 and 1000 characters."


class AnnouncementChannelUnavailable(ReviewFlowError):
    title = "Channel Not Found"
    description = "Review display channel not found. Please contact an administrator."
