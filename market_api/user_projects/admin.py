from django.contrib import admin

from .models import Project, Milestone, Bid, Contract, Review


class MilestoneInline(admin.TabularInline):
    model = Milestone
    extra = 0


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ('id', 'title', 'client', 'category', 'budget', 'status', 'deadline', 'created_at')
    list_filter = ('status', 'category')
    search_fields = ('title', 'description', 'client__email')
    inlines = [MilestoneInline]


@admin.register(Bid)
class BidAdmin(admin.ModelAdmin):
    list_display = ('id', 'project', 'contractor', 'proposed_budget', 'status', 'created_at')
    list_filter = ('status',)
    search_fields = ('project__title', 'contractor__email')


@admin.register(Contract)
class ContractAdmin(admin.ModelAdmin):
    list_display = ('id', 'project', 'contractor', 'total_amount', 'status', 'start_date', 'end_date')
    list_filter = ('status',)


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ('id', 'project', 'reviewer', 'reviewee', 'rating', 'created_at')
