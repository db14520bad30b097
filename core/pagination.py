from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination


class StandardResultsSetPagination(PageNumberPagination):
    """Standard pagination for list endpoints."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100

    def get_paginated_response_data(self, data):
        """Return pagination metadata along with results."""
        return {
            'count': self.page.paginator.count,
            'total_pages': self.page.paginator.num_pages,
            'current_page': self.page.number,
            'page_size': self.get_page_size(self.request),
            'next': self.get_next_link(),
            'previous': self.get_previous_link(),
            'results': data,
        }

    def get_paginated_response(self, data):
        return Response(self.get_paginated_response_data(data))


def paginated_response(view, request, queryset, serializer_class):
    """Serialize one page of ``queryset`` with the view's paginator."""
    paginator = view.pagination_class()
    page = paginator.paginate_queryset(queryset, request, view=view)
    if page is not None:
        data = serializer_class(page, many=True).data
        return Response(paginator.get_paginated_response_data(data))

    data = serializer_class(queryset, many=True).data
    return Response({'results': data, 'count': len(data)})
