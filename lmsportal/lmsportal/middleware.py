"""
Custom middleware to handle frame options for certificate PDFs
"""


class AllowPdfFramingMiddleware:
    """
    Middleware to remove X-Frame-Options header from PDF responses
    This allows certificates to be previewed in iframes on the learner pages
    """
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.get_response(request)

        if response.get('Content-Type', '').startswith('application/pdf') and 'X-Frame-Options' in response:
            del response['X-Frame-Options']

        return response
